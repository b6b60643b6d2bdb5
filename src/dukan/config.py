from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    db_path: Path
    logs_dir: Path
    exports_dir: Path


@dataclass(frozen=True)
class AiSettings:
    api_key: str = ""
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    image_model: str = "imagen-4.0-generate-001"
    text_model: str = "gemini-2.5-flash"
    timeout_seconds: float = 30.0

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "AiSettings":
        api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY") or ""
        timeout = os.environ.get("DUKAN_AI_TIMEOUT", "")
        try:
            timeout_seconds = float(timeout) if timeout else cls.timeout_seconds
        except ValueError:
            timeout_seconds = cls.timeout_seconds
        return cls(
            api_key=api_key.strip(),
            image_model=os.environ.get("DUKAN_IMAGE_MODEL", cls.image_model),
            text_model=os.environ.get("DUKAN_TEXT_MODEL", cls.text_model),
            timeout_seconds=timeout_seconds,
        )


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "DukanPOS") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"
    exports = base / "exports"
    db = base / "dukan.db"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)
    exports.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, db_path=db, logs_dir=logs, exports_dir=exports)
