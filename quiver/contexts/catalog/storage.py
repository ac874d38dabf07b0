"""
Profile Store

Simple key-value persistence for the catalog, stored as a single JSON file
(default: outs/profile_store.json, override with PROFILE_STORE_PATH).

Keys:
    resume_builder_profile   (dict): Resume data in wire shape
    resume_builder_bullets   (list): Bullet pool records
    resume_builder_analyses  (list): Recent oracle analyses

Usage:
    from quiver.contexts.catalog.storage import ProfileStore

    store = ProfileStore()
    store.save_profile(profile)
    profile = store.load_profile()
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv

from quiver.contexts.catalog.exceptions import InvalidProfileStructureError
from quiver.contexts.catalog.logger import _log_debug, _log_warning
from quiver.contexts.catalog.models import BulletRecord, Profile, ResumeData
from quiver.utils.timestamp import now_exact

load_dotenv()
PROFILE_STORE_PATH = Path(os.getenv("PROFILE_STORE_PATH", "outs/profile_store.json"))

PROFILE_KEY = "resume_builder_profile"
BULLET_POOL_KEY = "resume_builder_bullets"
ANALYSES_KEY = "resume_builder_analyses"

# Most recent analyses kept under ANALYSES_KEY
MAX_STORED_ANALYSES = 10


class ProfileStore:
    """
    JSON-file key-value store.

    Reads never raise on a missing or unreadable file; they fall back to the
    caller's default, and a malformed stored profile loads as None. Writes
    replace the file atomically and leave no temporary file behind on failure.
    """

    def __init__(self, store_path: Optional[Union[str, Path]] = None):
        self.store_path = Path(store_path) if store_path else PROFILE_STORE_PATH

    def _read_all(self) -> Dict[str, Any]:
        if not self.store_path.exists():
            return {}
        try:
            data = json.loads(self.store_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            _log_warning(f"Could not read profile store {self.store_path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.store_path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.store_path)
        except Exception:
            os.unlink(tmp_name)
            raise

    def get(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)
        _log_debug(f"Stored '{key}' in {self.store_path}")

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def save_profile(self, profile: Profile) -> None:
        """Store resume data and bullet pool under their two catalog keys."""
        data = self._read_all()
        data[PROFILE_KEY] = profile.resume.to_dict()
        data[BULLET_POOL_KEY] = [b.to_dict() for b in profile.bullet_pool]
        self._write_all(data)

    def load_profile(self) -> Optional[Profile]:
        """Rebuild the stored profile, or None if none is stored or it is malformed."""
        data = self._read_all()
        resume = data.get(PROFILE_KEY)
        if not isinstance(resume, dict):
            return None
        pool = data.get(BULLET_POOL_KEY) or []
        try:
            return Profile(
                resume=ResumeData.from_dict(resume),
                bullet_pool=[BulletRecord.from_dict(b) for b in pool],
            )
        except InvalidProfileStructureError as e:
            _log_warning(f"Ignoring malformed profile in {self.store_path}: {e}")
            return None

    def record_analysis(self, analysis: Dict[str, Any]) -> None:
        """Prepend an analysis to the recent-analyses list, keeping the newest few."""
        analyses = self.get(ANALYSES_KEY, [])
        if not isinstance(analyses, list):
            analyses = []
        analyses.insert(0, {"stored_at": now_exact(), **analysis})
        self.set(ANALYSES_KEY, analyses[:MAX_STORED_ANALYSES])
