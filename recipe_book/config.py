"""Runtime settings for the recipe book panel.

Nothing here is persisted by the panel itself; settings are read once from an
optional JSON document and otherwise fall back to the defaults below.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

GENERIC_DEVICE_LABEL = "Fabricator"
DEFAULT_TOGGLE_KEY = "F6"
DEFAULT_COMMAND_NAMES = ("recipebook", "rb")


class SettingsError(ValueError):
    """Raised when a settings document cannot be read or validated."""


class RecipeBookSettings(BaseModel):
    """User-facing knobs for the panel, its hotkey and its console command."""

    toggle_key: str = Field(
        default=DEFAULT_TOGGLE_KEY,
        description="Key that opens and closes the panel.",
    )
    command_names: Tuple[str, ...] = Field(
        default=DEFAULT_COMMAND_NAMES,
        description="Console command aliases that toggle the panel.",
    )
    command_help: str = Field(
        default="recipebook (or rb): open/close the crafting recipe book",
        description="Help line shown by the host console.",
    )
    generic_device_label: str = Field(
        default=GENERIC_DEVICE_LABEL,
        description="Device label used when a recipe accepts any fabricator.",
    )
    panel_title: str = Field(default="Recipe Book", description="Header row text.")
    button_label: str = Field(
        default="Recipe Book",
        description="Caption of the button injected into the fabricator screen.",
    )

    @field_validator("toggle_key")
    @classmethod
    def _check_key(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("toggle_key must not be blank")
        return cleaned

    @field_validator("command_names")
    @classmethod
    def _check_names(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        names = tuple(name.strip().lower() for name in value if name and name.strip())
        if not names:
            raise ValueError("at least one command name is required")
        return names

    @property
    def joined_command_names(self) -> str:
        """Return the aliases in the host's ``name|alias`` notation."""

        return "|".join(self.command_names)


def load_settings(path: Optional[Path | str] = None) -> RecipeBookSettings:
    """Load settings from ``path`` or return the defaults when it is ``None``."""

    if path is None:
        return RecipeBookSettings()

    settings_path = Path(path)
    if not settings_path.exists():
        raise SettingsError(f"Settings file {settings_path} was not found")

    try:
        payload = json.loads(settings_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Settings file {settings_path} is not valid JSON") from exc

    try:
        return RecipeBookSettings.model_validate(payload)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings in {settings_path}: {exc}") from exc


__all__ = [
    "DEFAULT_COMMAND_NAMES",
    "DEFAULT_TOGGLE_KEY",
    "GENERIC_DEVICE_LABEL",
    "RecipeBookSettings",
    "SettingsError",
    "load_settings",
]
