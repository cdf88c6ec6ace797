"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use ASINCLUDE_ prefix (e.g., ASINCLUDE_ARTIFACT_EXTENSION=.unit).

Settings can also be loaded from a .env file in the working directory.
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use ASINCLUDE_ prefix.

    Examples:
        ASINCLUDE_FORM_MARKER=$
        ASINCLUDE_UNIT_KEYWORD=module
        ASINCLUDE_DEFAULT_BLACKLIST='["__builtins__", "data"]'
    """

    model_config = SettingsConfigDict(
        env_prefix="ASINCLUDE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Respecialization configuration
    form_marker: str = Field(
        default="$",
        description="Leading character the serializer puts on a corrupted special form",
    )

    token_delimiter: str = Field(
        default=":",
        description="Separator between the raw tokens of a corrupted special form",
    )

    # Artifact configuration
    unit_keyword: str = Field(
        default="module",
        description="Keyword opening a unit declaration in the artifact",
    )

    unit_terminator: str = Field(
        default="end",
        description="Line closing a unit declaration in the artifact",
    )

    artifact_extension: str = Field(
        default=".pyunit",
        description="Extension appended to the unit name to form the artifact filename",
    )

    # Publishing configuration
    default_blacklist: List[str] = Field(
        default_factory=lambda: ["__builtins__"],
        description="Names never published into the shared namespace",
    )

    profile_file: Optional[str] = Field(
        default=None,
        description="Optional YAML form profile applied to every new driver",
    )

    debug_mode: bool = Field(
        default=False,
        description="Enable debug output while respecializing and loading",
    )

    def artifactName_make(self, name: str) -> str:
        """
        Generate the artifact filename for a unit.

        Args:
            name: Unit name

        Returns:
            Filename (e.g., "m1.pyunit")

        Example:
            >>> settings = AppSettings()
            >>> settings.artifactName_make("m1")
            'm1.pyunit'
        """
        return f"{name}{self.artifact_extension}"

    def unitHeader_make(self, name: str) -> str:
        """
        Generate the opening declaration line of a unit.

        Example:
            >>> AppSettings().unitHeader_make("m1")
            'module m1'
        """
        return f"{self.unit_keyword} {name}"


# Singleton instance - import this in your code
appsettings = AppSettings()
