"""Configuration helpers for the lc assistant."""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError, ConfigWriteError

logger = logging.getLogger(__name__)

APP_NAME = "lc"
CONFIG_FILENAME = "config.yaml"
CONFIG_DIR_ENV = "LC_CONFIG_DIR"

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_HISTORY = 10
DEFAULT_SYSTEM_PROMPT = """You are a professional Linux command-line assistant named lc. Your task is to answer users' questions about Linux commands, operations, and issues. Please follow these guidelines:

  1. Answer user questions directly, without using any Markdown formatting or text formatting (such as bold, italics, etc.).
  2. Keep answers concise and clear, suitable for display on a command-line interface.
  3. If the user provides command examples, carefully analyze and explain the role of each part.
  4. If errors or problems are encountered, provide possible causes and solutions.
  5. Use clear steps or numbered lists to explain complex processes.
  6. If you need to display code or commands, write them directly without using code block formatting.
  7. Avoid using emojis or other special characters that may display abnormally on the command line.
  8. If the user's question is unclear, politely request more information.
  9. Provide practical advice, including command best practices and security precautions.
  10. If the user requests an operation that may be risky, remind them of the potential consequences.
  11. Pay attention to the user's questions and requests, which are always in the Query. Please be sure to check them. The content in the Input is background or reference information.

  Remember, you must check the requirements in the received Query and the information in the Input, and your response will be displayed directly on the command-line interface, so keep the format simple and the content clear."""

SETTABLE_KEYS = (
    "openai_api_key",
    "openai_base_url",
    "default_model",
    "max_history",
    "system_prompt",
)


def user_config_dir() -> Path:
    """Return the platform's per-user configuration directory."""
    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise ConfigError("Failed to get config directory: APPDATA is not set")
        return Path(appdata)
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    try:
        return Path.home() / ".config"
    except RuntimeError as exc:
        raise ConfigError("Failed to get config directory") from exc


def app_dir() -> Path:
    """Directory holding the config file and the conversation history."""
    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return user_config_dir() / APP_NAME


def get_config_path() -> Path:
    return app_dir() / CONFIG_FILENAME


class Config(BaseModel):
    """Settings persisted in ``config.yaml``.

    Every field has a default so a partially written file still loads.
    """

    openai_api_key: str = ""
    openai_base_url: str = DEFAULT_BASE_URL
    default_model: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_history: int = Field(DEFAULT_MAX_HISTORY, ge=0)

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Read the config file, returning defaults when it does not exist."""
        config_path = path or get_config_path()
        if not config_path.exists():
            logger.debug("No config file at %s; using defaults", config_path)
            return cls()
        try:
            raw = config_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Failed to read config file: {config_path}: {exc}") from exc
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse config file: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError("Failed to parse config file: expected a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"Failed to parse config file: {exc}") from exc

    def save(self, path: Path | None = None) -> Path:
        config_path = path or get_config_path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            text = yaml.safe_dump(
                self.model_dump(), sort_keys=False, allow_unicode=True
            )
            config_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise ConfigWriteError(
                f"Failed to write config file: {config_path}: {exc}"
            ) from exc
        logger.debug("Saved config to %s", config_path)
        return config_path

    def set_value(self, key: str, value: str, *, path: Path | None = None) -> None:
        """Update one settable key and persist the whole document."""
        if key not in SETTABLE_KEYS:
            raise ConfigError(f"Unknown config key: {key}")
        if key == "max_history":
            try:
                parsed = int(value.strip())
            except ValueError as exc:
                raise ConfigError(f"Invalid max_history value: {value!r}") from exc
            if parsed < 0:
                raise ConfigError(f"Invalid max_history value: {value!r}")
            self.max_history = parsed
        else:
            setattr(self, key, value)
        self.save(path)

    def redacted(self) -> Dict[str, Any]:
        """Return the settings with the API key masked, for debug output."""
        data = self.model_dump()
        key = data.get("openai_api_key") or ""
        data["openai_api_key"] = f"{key[:3]}***" if key else ""
        return data
