"""
Profile loading.

Profiles are YAML (or JSON, which OmegaConf reads as YAML) files with the
shape:

    resume:
      personalInfo: {...}
      experience: [...]
      projects: [...]
      skills: {...}
      education: [...]
    bulletPool: [...]
"""

from pathlib import Path
from typing import Union

from omegaconf import OmegaConf

from quiver.contexts.catalog.exceptions import InvalidProfileStructureError
from quiver.contexts.catalog.logger import _log_debug, _log_info
from quiver.contexts.catalog.models import Profile


def load_profile(path: Union[str, Path]) -> Profile:
    """
    Load a user profile from a YAML or JSON file.

    Args:
        path: Profile file path

    Returns:
        Profile with resume data and bullet pool

    Raises:
        FileNotFoundError: If path does not exist
        InvalidProfileStructureError: If the file lacks a 'resume' mapping or
            contains malformed entries
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Profile file not found: {path}")

    _log_debug(f"Loading profile from {path}")
    data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)

    if not isinstance(data, dict) or not isinstance(data.get("resume"), dict):
        raise InvalidProfileStructureError(
            "Profile must contain a 'resume' mapping at root level",
            source_path=path,
            field_name="resume",
        )

    try:
        profile = Profile.from_dict(data)
    except InvalidProfileStructureError as e:
        raise InvalidProfileStructureError(e.message, source_path=path, field_name=e.field_name) from e

    _log_info(f"Loaded profile {path.name}: {profile.resume!r}, {len(profile.bullet_pool)} pooled bullets")
    return profile
