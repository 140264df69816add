"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.catalog import DEFAULT_SERVICES, ServiceCatalog
from .domain.conflict_checker import ConflictChecker
from .domain.models import ServiceKind
from .domain.padding import (
    BETWEEN_BOOKINGS,
    BREAKDOWN_TIME_MINUTES,
    BUFFER_TIME_MINUTES,
    COMPLEX_SERVICE_THRESHOLD,
    COMPLEX_SETUP_EXTRA_MINUTES,
    SETUP_TIME_MINUTES,
    PaddingPolicy,
)
from .domain.slot_generator import (
    BUSINESS_END_HOUR,
    BUSINESS_START_HOUR,
    DEFAULT_TIMEZONE,
    SlotGenerator,
)

CONFIG_FILENAME = "eventslots.yaml"


class BusinessHoursConfig(BaseModel):
    """Window in which slots are generated."""
    start_hour: int = BUSINESS_START_HOUR
    end_hour: int = BUSINESS_END_HOUR

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessHoursConfig":
        """Ensure the configured window opens before it closes."""
        if self.end_hour <= self.start_hour:
            raise ValueError("end_hour must be later than start_hour")
        return self


class PaddingConfig(BaseModel):
    """Buffer, setup and breakdown minutes."""
    buffer_minutes: int = BUFFER_TIME_MINUTES
    setup_minutes: int = SETUP_TIME_MINUTES
    complex_setup_extra_minutes: int = COMPLEX_SETUP_EXTRA_MINUTES
    complex_service_threshold: int = COMPLEX_SERVICE_THRESHOLD
    breakdown_minutes: int = BREAKDOWN_TIME_MINUTES

    @field_validator(
        "buffer_minutes",
        "setup_minutes",
        "complex_setup_extra_minutes",
        "breakdown_minutes",
    )
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Padding minutes must not be negative, got {value}")
        return value

    @field_validator("complex_service_threshold")
    @classmethod
    def validate_threshold(cls, value: int) -> int:
        if value < 1:
            raise ValueError("complex_service_threshold must be at least 1")
        return value


class ServiceConfig(BaseModel):
    """A service catalog entry."""
    name: str
    default_hours: float
    min_hours: float
    max_hours: float

    @model_validator(mode="after")
    def validate_bounds(self) -> "ServiceConfig":
        """Ensure min <= default <= max and all are positive."""
        if self.min_hours <= 0:
            raise ValueError(f"{self.name}: min_hours must be greater than zero")
        if not self.min_hours <= self.default_hours <= self.max_hours:
            raise ValueError(
                f"{self.name}: expected min_hours <= default_hours <= max_hours, "
                f"got {self.min_hours}/{self.default_hours}/{self.max_hours}"
            )
        return self

    def to_service_kind(self) -> ServiceKind:
        return ServiceKind(
            name=self.name,
            default_hours=self.default_hours,
            min_hours=self.min_hours,
            max_hours=self.max_hours,
        )


def _default_services() -> List[ServiceConfig]:
    return [
        ServiceConfig(
            name=service.name,
            default_hours=service.default_hours,
            min_hours=service.min_hours,
            max_hours=service.max_hours,
        )
        for service in DEFAULT_SERVICES
    ]


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = DEFAULT_TIMEZONE
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    padding: PaddingConfig = Field(default_factory=PaddingConfig)
    services: List[ServiceConfig] = Field(default_factory=_default_services)
    strict_services: bool = False

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the business time zone is a known IANA zone."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[ServiceConfig]) -> List[ServiceConfig]:
        """Ensure service names are unique."""
        seen: set[str] = set()
        for service in value:
            key = service.name.lower()
            if key in seen:
                raise ValueError(f"Duplicate service name detected: {service.name}")
            seen.add(key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "AppConfig":
        """
        Load an explicit config file, or the default one if it exists.

        Without an explicit path and without a default file, built-in
        defaults are used.
        """
        if config_path is not None:
            return cls.load_from_yaml(config_path)

        default_path = get_default_config_path()
        if default_path.exists():
            return cls.load_from_yaml(default_path)

        return cls()

    def build_catalog(self) -> ServiceCatalog:
        return ServiceCatalog(
            (service.to_service_kind() for service in self.services),
            strict=self.strict_services,
        )

    def build_padding_policy(self) -> PaddingPolicy:
        return PaddingPolicy(
            buffers={BETWEEN_BOOKINGS: self.padding.buffer_minutes},
            setup_minutes=self.padding.setup_minutes,
            complex_setup_extra_minutes=self.padding.complex_setup_extra_minutes,
            complex_service_threshold=self.padding.complex_service_threshold,
            breakdown_minutes=self.padding.breakdown_minutes,
        )

    def build_slot_generator(self) -> SlotGenerator:
        return SlotGenerator(
            start_hour=self.business_hours.start_hour,
            end_hour=self.business_hours.end_hour,
            timezone=self.timezone,
        )

    def build_conflict_checker(self) -> ConflictChecker:
        return ConflictChecker(padding=self.build_padding_policy())


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for eventslots.yaml in current directory
    config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / CONFIG_FILENAME

    return config_path
