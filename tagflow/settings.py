import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, PrivateAttr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tagflow.constants import (
    DEFAULT_ANALYTICS_FIELD_TYPE,
    RoleTrackingType,
    TAGFLOW_DEFAULT_LOGGER,
    TAGFLOW_DEFAULT_MATCHERS,
    TAGFLOW_DEFAULT_SETTINGS_FILE,
    TAGFLOW_SETTINGS_ENV_VAR,
)
from tagflow.exceptions import SettingsError


class ExtraVariable(BaseModel):
    """A single admin-configured variable, always written to the 'variables' section."""

    name: str
    value: str = ""


class TagFlowSettings(BaseSettings):
    """
    TagFlow settings management using Pydantic.

    Settings are loaded with the following priority (highest to lowest):
    1. Values from the settings YAML file and overrides passed to load()
    2. Environment variables (prefixed with TAGFLOW_SETTINGS_)
    3. Default values defined in the model

    The script location and version are optional here: a
    half-configured site must still load its settings, it simply renders
    nothing (see VariablesFactory).

    Environment variable examples:
    - TAGFLOW_SETTINGS_JS_FILE_LOCATION=https://cdn.example.com/s_code.js
    - TAGFLOW_SETTINGS_TRACK_ROLES=["administrator"]
    - TAGFLOW_SETTINGS_ROLE_TRACKING_TYPE=inclusive
    """

    model_config = SettingsConfigDict(
        env_prefix="TAGFLOW_SETTINGS_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    js_file_location: str = Field(default="", description="URL of the tracking JavaScript")
    version: str = Field(default="", description="Version of the tracking JavaScript")
    image_file_location: str = Field(default="", description="URL of the no-JavaScript tracking image")
    codesnippet: str = Field(default="", description="Main custom code snippet")
    extra_variables: list[ExtraVariable] = Field(
        default_factory=list, description="Variables added to the 'variables' section"
    )
    role_tracking_type: RoleTrackingType = Field(
        default=RoleTrackingType.EXCLUSIVE, description="How track_roles is interpreted"
    )
    track_roles: list[str] = Field(default_factory=list, description="Roles used by the role matcher")
    matchers: list[str] = Field(
        default_factory=lambda: list(TAGFLOW_DEFAULT_MATCHERS),
        description="Registered tracking matcher names to enable, in order",
    )
    contributors: list[str] = Field(
        default_factory=list, description="Dotted paths of variable contributor classes to import"
    )
    analytics_field_type: str = Field(
        default=DEFAULT_ANALYTICS_FIELD_TYPE, description="Field type holding per-entity overrides"
    )
    log_level: str = Field(default=TAGFLOW_DEFAULT_LOGGER["level"], description="Log level")
    log_dir: str | None = Field(default=None, description="Directory for log files")

    _settings_file: str | None = PrivateAttr(default=None)

    @field_validator("extra_variables", mode="before")
    @classmethod
    def validate_extra_variables(cls, v: Any) -> list[Any]:
        """Accept either a list of {name, value} dicts or a plain name -> value mapping."""
        if not v:
            return []
        if isinstance(v, dict):
            return [{"name": name, "value": value} for name, value in v.items()]
        if not isinstance(v, list):
            raise ValueError("extra_variables must be a list of {name, value} mappings")
        return v

    @field_validator("track_roles", mode="before")
    @classmethod
    def validate_track_roles(cls, v: Any) -> list[str]:
        """Normalize tracked roles to the list of selected role names.

        Checkbox-style mappings store unchecked roles with a falsy value
        (``{"editor": 0}``); those are dropped like empty list entries.
        """
        if not v:
            return []
        if isinstance(v, str):
            v = [v]
        if isinstance(v, dict):
            v = list(v.values())
        if not isinstance(v, list):
            raise ValueError(f"Invalid track_roles type: {type(v).__name__}")
        return [str(role) for role in v if role]

    @field_validator("role_tracking_type", mode="before")
    @classmethod
    def validate_role_tracking_type(cls, v: Any) -> RoleTrackingType:
        """Convert string to RoleTrackingType enum."""
        if isinstance(v, str):
            try:
                return RoleTrackingType(v)
            except ValueError as e:
                raise ValueError(
                    f"Invalid role tracking type: {v}. "
                    f"Must be one of: {', '.join(t.value for t in RoleTrackingType)}"
                ) from e
        return v

    @property
    def is_configured(self) -> bool:
        """True when both settings required for rendering are present."""
        return bool(self.js_file_location and self.version)

    @classmethod
    def load(
        cls, settings_file: str | None = None, base_dir: Path | None = None, **overrides: Any
    ) -> "TagFlowSettings":
        """
        Load settings from a YAML file with programmatic overrides.

        Settings file resolution priority (highest to lowest):
        1. Explicit settings_file parameter
        2. TAGFLOW_SETTINGS environment variable
        3. Default "tagflow.yaml" in the current directory

        Args:
            settings_file: Path to settings YAML file.
            base_dir: Base directory for resolving a relative log_dir. If None,
                     uses the directory containing the settings file.
            **overrides: Additional settings overriding YAML values.

        Returns:
            TagFlowSettings instance.

        Raises:
            SettingsError: If settings file not found or contains invalid data.
        """
        resolved_file = settings_file or os.getenv(TAGFLOW_SETTINGS_ENV_VAR) or TAGFLOW_DEFAULT_SETTINGS_FILE
        settings_path = Path(resolved_file).resolve()

        if not settings_path.exists():
            raise SettingsError(
                f"Settings file not found: {resolved_file}\n"
                f"Resolved to absolute path: {settings_path}\n"
                f"Current working directory: {Path.cwd()}"
            )

        try:
            with settings_path.open() as f:
                yaml_data = yaml.safe_load(f) or {}
        except Exception as e:
            raise SettingsError(f"Failed to load settings from {resolved_file}: {e}") from e

        if not isinstance(yaml_data, dict):
            raise SettingsError(
                f"Settings file must contain a YAML dictionary, got {type(yaml_data).__name__}"
            )

        try:
            instance = cls(**{**yaml_data, **overrides})
        except ValueError as e:
            raise SettingsError(f"Invalid settings in {resolved_file}: {e}") from e

        instance._settings_file = str(settings_path)

        base_dir = base_dir or settings_path.parent
        if instance.log_dir and not Path(instance.log_dir).is_absolute():
            instance.log_dir = str(base_dir / instance.log_dir)

        return instance

    @property
    def settings_file(self) -> str | None:
        """Path of the YAML file these settings were loaded from."""
        return self._settings_file

    @property
    def as_dict(self) -> dict[str, Any]:
        """Get settings as a dictionary."""
        return self.model_dump(mode="json")

    def __str__(self) -> str:
        return str(self.as_dict)
