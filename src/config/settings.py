"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use BRUSHPARSE_ prefix (e.g., BRUSHPARSE_VERBOSITY=2).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Engine configuration via environment variables.

    Environment variables use BRUSHPARSE_ prefix.

    Examples:
        BRUSHPARSE_SCRIPT_STYLE_KEY=script
        BRUSHPARSE_VERBOSITY=3
        BRUSHPARSE_UNSTYLED_TOKEN=Text.Whitespace
    """

    model_config = SettingsConfigDict(
        env_prefix="BRUSHPARSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Parser configuration
    script_style_key: str = Field(
        default="script",
        description="Style key given to the delimiters of embedded-language regions",
    )

    verbosity: int = Field(
        default=0,
        ge=0,
        description="Logging verbosity for parse calls (0=silent, 1=stages, 2=rules, 3=matches)",
    )

    # Pygments bridge configuration
    unstyled_token: str = Field(
        default="Text",
        description="Dotted Pygments token name for text no rule styled",
    )

    @field_validator("script_style_key")
    @classmethod
    def styleKey_validate(cls, value: str) -> str:
        if not value:
            raise ValueError("script_style_key cannot be empty")
        return value


# Singleton instance - import this in your code
appsettings = AppSettings()
