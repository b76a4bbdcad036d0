from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    # Media types accepted by the drop target. Parameters such as
    # "; charset=utf-8" are stripped before comparison.
    json_media_types: list[str] = ["application/json"]
    # Also accept structured-syntax types like "application/geo+json"
    accept_json_suffix: bool = True

    # "module:attribute" of the callable receiving (heartrate, time)
    drift_entry_point: str = "hrdrift.compute:record_heart_rate_series"

    log_level: str = "INFO"

    # Strava OAuth (optional)
    strava_client_id: str | None = None
    strava_client_secret: str | None = None
    strava_redirect_uri: str | None = None
    strava_base_url: str = "https://www.strava.com"
    strava_timeout: float = 30.0

    # Allow empty env strings for optional fields
    @field_validator(
        "strava_client_id",
        "strava_client_secret",
        "strava_redirect_uri",
        mode="before",
    )
    @classmethod
    def _empty_to_none(cls, v):
        if v in ("", None, "null", "None"):
            return None
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).upper() if v else "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
