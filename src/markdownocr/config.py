# -*- coding: utf-8 -*-
"""
src/markdownocr/config.py

Module for handling application configuration.

The backend endpoint, model identifier, OCR prompt and limits are process-wide
constants. They are collected once at startup into an immutable
`BackendSettings` instance that is handed to the recognizer's constructor.
A user-specific config.ini may override the defaults; it is created with the
default values on the first run.
"""

import configparser
import logging
import platform
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "MarkdownOCR"
DEFAULT_CONFIG_FILENAME = "config.ini"

DEFAULT_BASE_URL = "http://localhost:11434"
GENERATE_ENDPOINT = "/api/generate"
DEFAULT_MODEL = "benhaotang/Nanonets-OCR-s:latest"
DEFAULT_PROMPT = (
    "Recognize the text in the image and return the recognized text content "
    "in Markdown format, without adding any explanation or extra formatting."
)
DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0
DEFAULT_MIN_SELECTION_SIZE = 5


@dataclass(frozen=True)
class BackendSettings:
    """Immutable configuration for one process run."""

    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    prompt: str = DEFAULT_PROMPT
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT_SECONDS
    min_selection_size: int = DEFAULT_MIN_SELECTION_SIZE

    def __post_init__(self):
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.probe_timeout <= 0:
            raise ValueError(f"probe_timeout must be positive, got {self.probe_timeout}")
        if self.min_selection_size < 0:
            raise ValueError(f"min_selection_size must be >= 0, got {self.min_selection_size}")
        # Normalize so that endpoint joining never produces '//'.
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        try:
            url = httpx.URL(self.base_url)
        except httpx.InvalidURL as e:
            raise ValueError(f"base_url is not a valid URL: {self.base_url!r} ({e})") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"base_url must be an http(s) URL with a host, got {self.base_url!r}")

    @property
    def generate_url(self) -> str:
        return self.base_url + GENERATE_ENDPOINT


def get_app_dir() -> Path:
    """
    Gets the application's data directory in a cross-platform way.

    - Windows: %APPDATA%/MarkdownOCR
    - macOS: ~/Library/Application Support/MarkdownOCR
    - Linux: ~/.config/MarkdownOCR

    Returns:
        Path: A Path object to the application's data directory.
    """
    if platform.system() == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / APP_NAME
    elif platform.system() == "Darwin":  # macOS
        app_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:  # Linux and other Unix-like
        app_dir = Path.home() / ".config" / APP_NAME

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class Config:
    """
    Manages application configuration by loading defaults and overriding
    them with settings from a user-specific config file.
    """

    def __init__(self, app_dir: Optional[Path] = None):
        """
        Initializes the configuration manager.

        Args:
            app_dir (Path, optional): Directory holding config.ini. Defaults to
                                      the per-user application directory.
        """
        self.parser = configparser.ConfigParser()
        self.app_dir = Path(app_dir) if app_dir is not None else get_app_dir()
        self.config_file_path = self.app_dir / DEFAULT_CONFIG_FILENAME

        self._load_defaults()
        self._load_from_file()

    def _load_defaults(self):
        """Sets the default configuration values in the parser object."""
        self.parser["Backend"] = {
            "base_url": DEFAULT_BASE_URL,
            "model": DEFAULT_MODEL,
            "prompt": DEFAULT_PROMPT,
            "timeout": str(DEFAULT_TIMEOUT_SECONDS),
            "probe_timeout": str(DEFAULT_PROBE_TIMEOUT_SECONDS),
        }
        self.parser["Selection"] = {
            "min_selection_size": str(DEFAULT_MIN_SELECTION_SIZE),
        }

    def _load_from_file(self):
        """
        Loads settings from the config.ini file, overriding defaults.
        If the file doesn't exist, it will be created with default values.
        """
        if not self.config_file_path.exists():
            self._save_defaults()
        else:
            self.parser.read(self.config_file_path, encoding="utf-8")

    def _save_defaults(self):
        """Saves the current (default) configuration to the config file."""
        try:
            self.app_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                configfile.write(f"# {APP_NAME} Configuration File\n")
                configfile.write("# You can edit these values. Restart the app for changes to take effect.\n\n")
                self.parser.write(configfile)
        except OSError as e:
            # Non-critical: the defaults stay in effect.
            logger.warning(f"Could not write config file at {self.config_file_path}: {e}")

    # --- Properties to access settings easily and with correct types ---

    @property
    def base_url(self) -> str:
        return self.parser.get("Backend", "base_url", fallback=DEFAULT_BASE_URL)

    @property
    def model(self) -> str:
        return self.parser.get("Backend", "model", fallback=DEFAULT_MODEL)

    @property
    def prompt(self) -> str:
        return self.parser.get("Backend", "prompt", fallback=DEFAULT_PROMPT)

    @property
    def timeout(self) -> float:
        """Request timeout for one recognition attempt, in seconds."""
        return self.parser.getfloat("Backend", "timeout", fallback=DEFAULT_TIMEOUT_SECONDS)

    @property
    def probe_timeout(self) -> float:
        return self.parser.getfloat("Backend", "probe_timeout", fallback=DEFAULT_PROBE_TIMEOUT_SECONDS)

    @property
    def min_selection_size(self) -> int:
        """Selections must be strictly larger than this in both dimensions."""
        return self.parser.getint("Selection", "min_selection_size", fallback=DEFAULT_MIN_SELECTION_SIZE)

    def backend_settings(self) -> BackendSettings:
        """Freezes the current values into a `BackendSettings` instance."""
        return BackendSettings(
            base_url=self.base_url,
            model=self.model,
            prompt=self.prompt,
            timeout=self.timeout,
            probe_timeout=self.probe_timeout,
            min_selection_size=self.min_selection_size,
        )
