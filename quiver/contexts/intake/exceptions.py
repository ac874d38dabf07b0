"""Custom exceptions for the intake context."""

from typing import Optional


class InvalidAnalysisRequestError(ValueError):
    """
    Raised when a job analysis request fails validation.

    Attributes:
        message: Error description
        field_name: Request field that failed validation
    """

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.message = message
        self.field_name = field_name
        super().__init__(f"{message} (field: {field_name})" if field_name else message)


class OracleResponseError(Exception):
    """
    Raised when the relevance oracle's reply cannot be used at all.

    Attributes:
        message: Error description
        provider_name: Provider that produced the reply (e.g., 'anthropic/claude-...')
        response_snippet: Beginning of the raw reply
    """

    def __init__(
        self,
        message: str,
        provider_name: Optional[str] = None,
        response_snippet: Optional[str] = None,
    ):
        self.message = message
        self.provider_name = provider_name
        self.response_snippet = response_snippet

        parts = [message]
        if provider_name:
            parts.append(f"Provider: {provider_name}")
        if response_snippet:
            snippet = response_snippet[:200] + "..." if len(response_snippet) > 200 else response_snippet
            parts.append(f"\nResponse:\n{snippet}")

        super().__init__("\n".join(parts))
