"""
Configuration module for the form engine.

Handles environment variables and default settings. Every option here is
a default; a ``FormController`` argument always wins over it.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default).lower()).lower() == "true"


def _env_optional_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


@dataclass
class FormEngineConfig:
    """Configuration settings for the form engine."""

    # Validation triggers
    validate_on_change: bool = False
    validate_on_blur: bool = True

    # Auto-save settings
    auto_save: bool = False
    auto_save_delay: float = 1.0  # Seconds of quiet before auto-save fires

    # Submission settings
    submit_timeout: float | None = None  # None waits for the callback indefinitely

    # Step navigation
    require_valid_step: bool = False

    @classmethod
    def from_env(cls) -> "FormEngineConfig":
        """
        Create configuration from environment variables.

        If an environment variable is not set, uses the class field default value.
        """
        _defaults = cls()

        return cls(
            validate_on_change=_env_bool("FORM_ENGINE_VALIDATE_ON_CHANGE", _defaults.validate_on_change),
            validate_on_blur=_env_bool("FORM_ENGINE_VALIDATE_ON_BLUR", _defaults.validate_on_blur),
            auto_save=_env_bool("FORM_ENGINE_AUTO_SAVE", _defaults.auto_save),
            auto_save_delay=float(os.getenv("FORM_ENGINE_AUTO_SAVE_DELAY", str(_defaults.auto_save_delay))),
            submit_timeout=_env_optional_float("FORM_ENGINE_SUBMIT_TIMEOUT", _defaults.submit_timeout),
            require_valid_step=_env_bool("FORM_ENGINE_REQUIRE_VALID_STEP", _defaults.require_valid_step),
        )


config = FormEngineConfig.from_env()


def get_config() -> FormEngineConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> FormEngineConfig:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
    return config
