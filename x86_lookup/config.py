"""Configuration loader for x86-lookup."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional

from .errors import ConfigError

APP_NAME = "x86-lookup"

DEFAULT_EXTRACTOR = "pdftotext"
DEFAULT_PDFTOTEXT = "pdftotext"
DEFAULT_EXTRACT_TIMEOUT = 120.0
DEFAULT_VIEWERS = ["evince", "okular", "zathura", "mupdf", "xpdf", "browser"]


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {key} must be a number") from exc


def _get_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if value is None:
        return default
    value_lower = value.lower()
    if value_lower in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if value_lower in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ConfigError(f"Environment variable {key} must be a boolean")


def _get_list(key: str, default: List[str]) -> List[str]:
    value = _get_env(key)
    if value is None:
        return list(default)
    items = [item.strip().lower() for item in value.split(",")]
    return [item for item in items if item]


def default_cache_root() -> Path:
    """Platform cache directory for x86-lookup index files."""
    if sys.platform == "win32":
        base = _get_env("LOCALAPPDATA")
        if base:
            return Path(base) / APP_NAME / "Cache"
        return Path.home() / "AppData" / "Local" / APP_NAME / "Cache"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / APP_NAME
    xdg = _get_env("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".cache" / APP_NAME


@dataclass(slots=True)
class AppConfig:
    pdf_path: Optional[Path]
    cache_dir: Path
    extractor: str = DEFAULT_EXTRACTOR
    pdftotext_program: str = DEFAULT_PDFTOTEXT
    extract_timeout: float = DEFAULT_EXTRACT_TIMEOUT
    viewers: List[str] = field(default_factory=lambda: list(DEFAULT_VIEWERS))
    log_level: str = "WARNING"
    log_json: bool = False

    def require_pdf(self) -> Path:
        """Return the configured document path or raise ConfigError."""
        if self.pdf_path is None:
            raise ConfigError(
                "No Intel SDM PDF configured; set X86_LOOKUP_PDF or pass --pdf"
            )
        if not self.pdf_path.is_file():
            raise ConfigError(f"Configured PDF does not exist: {self.pdf_path}")
        return self.pdf_path

    def with_pdf(self, pdf_path: Optional[Path]) -> "AppConfig":
        if pdf_path is None:
            return self
        return replace(self, pdf_path=pdf_path.expanduser())


def load_config() -> AppConfig:
    pdf_value = _get_env("X86_LOOKUP_PDF")
    pdf_path = Path(pdf_value).expanduser() if pdf_value else None

    cache_value = _get_env("X86_LOOKUP_CACHE_DIR")
    cache_dir = Path(cache_value).expanduser() if cache_value else default_cache_root()

    extractor = _get_env("X86_LOOKUP_EXTRACTOR", DEFAULT_EXTRACTOR).lower()
    pdftotext_program = _get_env("X86_LOOKUP_PDFTOTEXT", DEFAULT_PDFTOTEXT)
    extract_timeout = max(1.0, _get_float("X86_LOOKUP_EXTRACT_TIMEOUT", DEFAULT_EXTRACT_TIMEOUT))
    viewers = _get_list("X86_LOOKUP_VIEWERS", DEFAULT_VIEWERS)
    log_level = _get_env("LOG_LEVEL", "WARNING").upper()
    log_json = _get_bool("LOG_JSON", False)

    return AppConfig(
        pdf_path=pdf_path,
        cache_dir=cache_dir,
        extractor=extractor,
        pdftotext_program=pdftotext_program,
        extract_timeout=extract_timeout,
        viewers=viewers,
        log_level=log_level,
        log_json=log_json,
    )
