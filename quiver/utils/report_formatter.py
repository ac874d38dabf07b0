"""
Plain-text tables for console reports.

Used by the targeting context to print page-space usage. Cells longer than
their column are cut with an ellipsis so rows always stay aligned.
"""

from dataclasses import dataclass
from typing import Any, List, Sequence


@dataclass(frozen=True)
class Column:
    """
    Attributes:
        name: Header text
        width: Cell width in characters
        align: Format alignment ('<', '>' or '^')
    """

    name: str
    width: int
    align: str = "<"

    def cell(self, value: Any) -> str:
        text = str(value)
        if len(text) > self.width:
            text = text[: max(self.width - 1, 0)] + "…"
        return f"{text:{self.align}{self.width}}"


class TableFormatter:
    """Line-by-line table builder; every add_* call returns self."""

    def __init__(self, columns: Sequence[Column], total_width: int = 60):
        self.columns = list(columns)
        self.total_width = total_width
        self.lines: List[str] = []

    def _rule(self, char: str) -> str:
        return char * self.total_width

    def add_section_header(self, title: str) -> "TableFormatter":
        self.lines.extend([self._rule("="), title, self._rule("=")])
        return self

    def add_table_header(self) -> "TableFormatter":
        return self.add_row([col.name for col in self.columns])

    def add_separator(self, char: str = "-") -> "TableFormatter":
        self.lines.append(self._rule(char))
        return self

    def add_row(self, values: Sequence[Any]) -> "TableFormatter":
        """
        Raises:
            ValueError: If the value count differs from the column count
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Row has {len(values)} values for {len(self.columns)} columns")
        self.lines.append(" ".join(col.cell(value) for col, value in zip(self.columns, values)))
        return self

    def add_text(self, text: str) -> "TableFormatter":
        self.lines.append(text)
        return self

    def add_blank_line(self) -> "TableFormatter":
        return self.add_text("")

    def render(self) -> str:
        return "\n".join(self.lines)


def format_percentage(count: int, total: int, decimal_places: int = 1) -> str:
    """Share of total as a percentage string; 0% when total is zero."""
    share = count / total * 100 if total else 0.0
    return f"{share:.{decimal_places}f}%"
