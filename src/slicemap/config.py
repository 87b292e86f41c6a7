"""slicemap configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files. Only the command line reads these settings; the resolution
pipeline receives every parameter explicitly.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from slicemap.composition.constants import parse_target
from slicemap.composition.types import ViewMode
from slicemap.geometry.primitives import Size


class ConfigError(Exception):
    """Raised when a configuration value is missing or cannot be used.

    Example:
        >>> Settings(_env_file=None, DEFAULT_TARGET="wide").require_target()
        Traceback (most recent call last):
        ...
        ConfigError: Default target resolution is invalid ('wide'). Set it in
        .env file or DEFAULT_TARGET environment variable.
    """

    def __init__(self, key_name: str, env_var: str, value: object = None) -> None:
        """Initialize configuration error.

        Args:
            key_name: Human-readable name of the offending key.
            env_var: Environment variable name to set.
            value: The rejected value, if any.
        """
        self.key_name = key_name
        self.env_var = env_var
        self.value = value
        problem = "not configured" if value is None else f"is invalid ({value!r})"
        message = (
            f"{key_name} {problem}. "
            f"Set it in .env file or {env_var} environment variable."
        )
        super().__init__(message)


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "console"  # "console" or "json"

    # Resolution defaults for the command line
    DEFAULT_VIEW_MODE: ViewMode = ViewMode.OUTPUT
    DEFAULT_TARGET: str = "original"  # preset name or WIDTHxHEIGHT

    # Canvas used when nothing can be inferred from the descriptor
    FALLBACK_WIDTH: int = 1920
    FALLBACK_HEIGHT: int = 1080

    def require_target(self) -> Size | None:
        """Parse DEFAULT_TARGET, raising ConfigError if it is not usable.

        Returns:
            The target Size, or None for "original" (no explicit target).

        Raises:
            ConfigError: If DEFAULT_TARGET is neither a preset nor WIDTHxHEIGHT.
        """
        try:
            return parse_target(self.DEFAULT_TARGET)
        except ValueError:
            raise ConfigError(
                "Default target resolution", "DEFAULT_TARGET", self.DEFAULT_TARGET
            ) from None

    def require_fallback_size(self) -> Size:
        """Get the fallback canvas size, raising ConfigError if not positive."""
        if self.FALLBACK_WIDTH <= 0:
            raise ConfigError("Fallback width", "FALLBACK_WIDTH", self.FALLBACK_WIDTH)
        if self.FALLBACK_HEIGHT <= 0:
            raise ConfigError(
                "Fallback height", "FALLBACK_HEIGHT", self.FALLBACK_HEIGHT
            )
        return Size(width=self.FALLBACK_WIDTH, height=self.FALLBACK_HEIGHT)


# Singleton instance for import convenience
settings = Settings()
