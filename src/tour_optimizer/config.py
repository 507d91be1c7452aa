"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TOUR_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "Transit Tour Optimizer API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for waypoint and itinerary files.")
    addresses_file: Path = Field(
        default=Path("addresses.json"),
        description="JSON array of waypoint names. Relative paths resolve under data_root.",
    )
    itineraries_file: Path = Field(
        default=Path("itineraries.json"),
        description="Persisted cost matrix. Relative paths resolve under data_root.",
    )

    digitransit_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "TOUR_DIGITRANSIT_API_KEY",
            "DIGITRANSIT_PRIMARY_KEY",
            "DIGITRANSIT_SUBSCRIPTION_KEY",
        ),
        description="Subscription key sent as the digitransit-subscription-key header.",
    )
    digitransit_geocoding_url: str = "https://api.digitransit.fi/geocoding/v1/search"
    digitransit_routing_url: str = "https://api.digitransit.fi/routing/v1/routers/hsl/index/graphql"
    geocoding_focus_lat: float = Field(default=60.2, ge=-90.0, le=90.0)
    geocoding_focus_lon: float = Field(default=24.936, ge=-180.0, le=180.0)
    geocoding_radius_km: float = Field(default=30.0, gt=0.0)
    plan_num_itineraries: int = Field(default=5, ge=1)
    plan_date: str = Field(default="2023-10-07", description="Service date used when planning itineraries.")
    plan_time: str = Field(default="12:00:00", description="Departure time used when planning itineraries.")

    http_timeout_seconds: float = Field(default=30.0, gt=0.0)
    http_max_retries: int = Field(default=3, ge=0)
    http_backoff_seconds: float = Field(default=1.0, ge=0.0)

    search_max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Worker threads for the permutation search. Defaults to the CPU count.",
    )
    search_batch_size: int = Field(default=256, ge=1)
    progress_interval: int = Field(default=100_000, ge=1)
    max_waypoints: int = Field(
        default=10,
        ge=1,
        description="Largest waypoint set accepted by the exhaustive search (10! = 3 628 800 orderings).",
    )
    cost_model: Literal["boundary", "path_only"] = "boundary"
    log_level: str = "INFO"

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("addresses_file", "itineraries_file", mode="before")
    @classmethod
    def _expand_file(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser()


settings = Settings()
