"""
Configuration for linguard.

Handles:
- Reading settings from linguard.yaml (project) and ~/.linguard/config.yaml (user)
- Environment variable overrides
- Thread-safe file access

Setting resolution order:
1. LINGUARD_* environment variables
2. Project file (linguard.yaml in the project directory)
3. User file (~/.linguard/config.yaml)
4. Defaults
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from linguard.i18n.detector import DEFAULT_LOCALE, normalize_locale

logger = logging.getLogger(__name__)

PROJECT_FILE = "linguard.yaml"
USER_DIR = ".linguard"
USER_FILE = "config.yaml"

DEFAULTS: dict[str, Any] = {
    "reference_locale": DEFAULT_LOCALE,
    "catalog_dir": "locales",
    "strict": False,
    "debug": False,
}

ENV_VARS = {
    "reference_locale": "LINGUARD_REFERENCE_LOCALE",
    "catalog_dir": "LINGUARD_CATALOG_DIR",
    "strict": "LINGUARD_STRICT",
    "debug": "LINGUARD_DEBUG",
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    """Resolved settings plus where each value came from."""

    reference_locale: str
    catalog_dir: Path
    strict: bool
    debug: bool
    sources: dict[str, str] = field(default_factory=dict)


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw value to the setting's type, or return None if invalid."""
    if name in ("strict", "debug"):
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
        return None
    if name == "reference_locale":
        return normalize_locale(value) if isinstance(value, str) else None
    if name == "catalog_dir":
        return value if isinstance(value, str) and value.strip() else None
    return None


class LinguardConfig:
    """
    Resolves linguard settings from the environment and config files.

    Thread Safety:
        File reads are serialized with a threading.Lock.
    """

    def __init__(self, project_dir: str | Path | None = None, home: str | Path | None = None):
        """
        Initialize the configuration reader.

        Args:
            project_dir: Directory holding linguard.yaml (defaults to the working directory)
            home: Home directory for the user file (defaults to Path.home())
        """
        self.project_dir = Path(project_dir) if project_dir is not None else Path.cwd()
        home_dir = Path(home) if home is not None else Path.home()
        self.project_file = self.project_dir / PROJECT_FILE
        self.user_file = home_dir / USER_DIR / USER_FILE
        self._thread_lock = threading.Lock()

    def _load_file(self, path: Path) -> dict[str, Any]:
        """
        Load one YAML config file.

        Returns:
            Dictionary of settings, or empty dict on failure

        Handles:
            - Missing file (returns empty dict)
            - Malformed YAML (returns empty dict, logs warning)
            - Empty file (returns empty dict)
            - Invalid types (returns empty dict if not a dict)
        """
        try:
            with self._thread_lock:
                if not path.exists():
                    return {}

                with open(path, encoding="utf-8") as f:
                    content = f.read()

            if not content.strip():
                return {}

            data = yaml.safe_load(content)
            if data is None:
                return {}
            if not isinstance(data, dict):
                logger.warning(
                    f"Config file {path} contains invalid type: {type(data).__name__}, "
                    "expected dict. Ignoring it."
                )
                return {}
            return data

        except yaml.YAMLError as e:
            logger.warning(f"Malformed YAML in config file {path}: {e}. Ignoring it.")
            return {}
        except OSError as e:
            logger.debug(f"Could not read config file {path}: {e}")
            return {}

    def load(self) -> Settings:
        """
        Resolve every setting.

        Returns:
            Settings with the effective values and their sources
        """
        layers = [
            ("project", self._load_file(self.project_file)),
            ("user", self._load_file(self.user_file)),
        ]

        values: dict[str, Any] = {}
        sources: dict[str, str] = {}

        for name, default in DEFAULTS.items():
            env_value = os.environ.get(ENV_VARS[name], "")
            coerced = _coerce(name, env_value) if env_value else None
            if coerced is not None:
                values[name], sources[name] = coerced, "environment"
                continue

            for source, data in layers:
                if name not in data:
                    continue
                coerced = _coerce(name, data[name])
                if coerced is None:
                    logger.warning(f"Ignoring invalid '{name}' value in {source} config")
                    continue
                values[name], sources[name] = coerced, source
                break
            else:
                values[name], sources[name] = default, "default"

        catalog_dir = Path(values["catalog_dir"])
        if not catalog_dir.is_absolute():
            catalog_dir = self.project_dir / catalog_dir

        return Settings(
            reference_locale=values["reference_locale"],
            catalog_dir=catalog_dir,
            strict=values["strict"],
            debug=values["debug"],
            sources=sources,
        )

    def get_info(self) -> dict[str, Any]:
        """
        Detailed configuration info for display.

        Returns:
            Dictionary with each setting's value and source
        """
        settings = self.load()
        return {
            "reference_locale": settings.reference_locale,
            "catalog_dir": str(settings.catalog_dir),
            "strict": settings.strict,
            "debug": settings.debug,
            "sources": dict(settings.sources),
            "project_file": str(self.project_file) if self.project_file.exists() else None,
            "user_file": str(self.user_file) if self.user_file.exists() else None,
        }
