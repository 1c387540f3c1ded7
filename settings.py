from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from errors import ConfigurationError

DEFAULT_API_VERSION = "2024-01-01"
DEFAULT_TIMEOUT = 10.0


class Settings(BaseSettings):
    """Process configuration, built once at startup and passed by reference.

    Each field reads the environment variable named by its validation alias;
    empty variables count as unset.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        populate_by_name=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    project_id: str = Field(validation_alias="SANITY_PROJECT_ID")
    dataset: str = Field(validation_alias="SANITY_DATASET")
    api_version: str = Field(default=DEFAULT_API_VERSION, validation_alias="SANITY_API_VERSION")
    api_token: Optional[str] = Field(default=None, validation_alias="SANITY_API_TOKEN")
    preview_secret: Optional[str] = Field(default=None, validation_alias="SANITY_PREVIEW_SECRET")
    use_cdn: bool = Field(default=True, validation_alias="SANITY_USE_CDN")
    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, validation_alias="SANITY_REQUEST_TIMEOUT")
    draft_cookie_secure: bool = Field(default=True, validation_alias="DRAFT_COOKIE_SECURE")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.upper()

    @property
    def preview_available(self) -> bool:
        return self.api_token is not None

    @classmethod
    def from_env(cls) -> "Settings":
        """Load from the environment, turning validation failures into ConfigurationError."""
        try:
            return cls()
        except ValidationError as exc:
            missing = [str(err["loc"][0]) for err in exc.errors() if err["type"] == "missing"]
            if missing:
                raise ConfigurationError(
                    "Missing Sanity configuration. Please check your environment variables:\n"
                    + "\n".join(f"- {name}" for name in missing)
                ) from None
            invalid = "; ".join(f"{err['loc'][0]}: {err['msg']}" for err in exc.errors())
            raise ConfigurationError(f"Invalid configuration: {invalid}") from None
