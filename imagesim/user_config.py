"""
Layered settings for imagesim.

Each tunable setting is resolved from, in order:
1. An IMAGESIM_* environment variable
2. The JSON settings file (~/.imagesim/config.json, or the directory named by
   IMAGESIM_CONFIG_DIR)
3. The calibrated constant in config.py

Example config.json:
{
    "default_workers": 8,
    "height_threshold": 12,
    "corr_coeff": 0.75
}
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, NamedTuple, Optional

from . import config as defaults

logger = logging.getLogger(__name__)


class Setting(NamedTuple):
    """Default value, environment override, value type and lower bound of one setting."""
    default: Any
    env_var: str
    kind: type
    minimum: Optional[float] = None


# Overridable settings, keyed by their name in config.json
SETTINGS = {
    'default_workers': Setting(defaults.DEFAULT_WORKERS, 'IMAGESIM_WORKERS', int, minimum=1),
    'max_image_pixels': Setting(defaults.MAX_IMAGE_PIXELS, 'IMAGESIM_MAX_PIXELS', int, minimum=1),
    'base_width': Setting(defaults.BASE_WIDTH, 'IMAGESIM_BASE_WIDTH', int, minimum=1),
    'height_threshold': Setting(defaults.HEIGHT_THRESHOLD, 'IMAGESIM_HEIGHT_THRESHOLD', int),
    'color_diff': Setting(defaults.COLOR_DIFF, 'IMAGESIM_COLOR_DIFF', float),
    'eucl_coeff': Setting(defaults.EUCL_COEFF, 'IMAGESIM_EUCL_COEFF', float),
    'corr_coeff': Setting(defaults.CORR_COEFF, 'IMAGESIM_CORR_COEFF', float),
}

# Settings that make up SimilarityThresholds
THRESHOLD_SETTINGS = ('base_width', 'height_threshold', 'color_diff', 'eucl_coeff', 'corr_coeff')


class UserConfig:
    """
    Process-wide view of the user's settings.

    There is a single instance; the settings file is parsed on first use and
    kept until reload() is called.
    """

    _instance: Optional['UserConfig'] = None
    _file_values: Optional[dict] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        """Directory holding the settings file."""
        override = os.getenv('IMAGESIM_CONFIG_DIR')
        return Path(override) if override else Path(defaults.CONFIG_DIR)

    @property
    def config_file_path(self) -> Path:
        return self.config_dir / 'config.json'

    def _read_file(self) -> dict:
        path = self.config_file_path
        if not path.exists():
            return {}
        try:
            with open(path, encoding='utf-8') as f:
                values = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable settings file {path}: {e}")
            return {}
        if not isinstance(values, dict):
            logger.warning(f"Ignoring settings file {path}: expected a JSON object")
            return {}
        logger.debug(f"Read {len(values)} settings from {path}")
        return values

    def _values(self) -> dict:
        if self._file_values is None:
            self._file_values = self._read_file()
        return self._file_values

    def reload(self):
        """Forget the cached settings file so the next lookup reads it again."""
        self._file_values = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Look up a raw value: environment variable, then settings file, then default.

        Environment values are parsed as JSON when possible, so "8" gives an
        int and "0.5" a float; anything else is returned as the plain string.
        """
        if env_var:
            raw = os.getenv(env_var)
            if raw is not None:
                try:
                    return json.loads(raw)
                except (json.JSONDecodeError, TypeError):
                    return raw
        return self._values().get(key, default)

    def setting(self, name: str) -> Any:
        """
        Resolve a named setting and coerce it to its type.

        A value that cannot be coerced, or that falls below the setting's
        minimum, is reported and replaced by the default.
        """
        entry = SETTINGS[name]
        value = self.get(name, entry.default, entry.env_var)
        try:
            coerced = entry.kind(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid value {value!r} for {name}, using {entry.default}")
            return entry.default
        # int() truncates, so 0.5 workers must be caught after coercion
        if entry.minimum is not None and coerced < entry.minimum:
            logger.warning(f"{name} must be at least {entry.minimum}, got {value!r}; using {entry.default}")
            return entry.default
        return coerced

    @property
    def default_workers(self) -> int:
        """Thread pool size for batch fingerprinting."""
        return self.setting('default_workers')

    @property
    def max_image_pixels(self) -> int:
        """Pillow decompression bomb limit."""
        return self.setting('max_image_pixels')

    @property
    def base_width(self) -> int:
        return self.setting('base_width')

    @property
    def height_threshold(self) -> int:
        return self.setting('height_threshold')

    @property
    def color_diff(self) -> float:
        return self.setting('color_diff')

    @property
    def eucl_coeff(self) -> float:
        return self.setting('eucl_coeff')

    @property
    def corr_coeff(self) -> float:
        return self.setting('corr_coeff')

    def effective_settings(self) -> dict:
        """Every setting with the value currently in force."""
        return {name: self.setting(name) for name in SETTINGS}

    def thresholds(self):
        """Similarity filter constants built from the current settings."""
        from .fingerprint.similarity import SimilarityThresholds

        return SimilarityThresholds(**{name: self.setting(name) for name in THRESHOLD_SETTINGS})

    def create_example_config(self) -> bool:
        """
        Write a settings file holding every default.

        Returns:
            True if the file was written
        """
        contents = {"_comment": "imagesim settings; environment variables take precedence"}
        contents.update({name: entry.default for name, entry in SETTINGS.items()})
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(contents, f, indent=2)
        except OSError as e:
            logger.error(f"Cannot write settings file {self.config_file_path}: {e}")
            return False
        logger.info(f"Wrote example settings to {self.config_file_path}")
        return True


_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Return the shared UserConfig."""
    return _user_config


__all__ = ['Setting', 'SETTINGS', 'UserConfig', 'get_user_config']
