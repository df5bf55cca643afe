"""
Configuration management using Pydantic models loaded from YAML.

This is where schedule authoring is validated; the domain calculator trusts
whatever it is given.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import pendulum
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .domain.models import DailySchedule, HourMinute, Space, Weekday


class DefaultsConfig(BaseModel):
    """Default settings for availability queries."""
    number_of_days: int = 7

    @field_validator("number_of_days")
    @classmethod
    def validate_number_of_days(cls, value: int) -> int:
        """Ensure the default span covers at least one day."""
        if value < 1:
            raise ValueError("number_of_days must be at least 1")
        return value


class HourMinuteConfig(BaseModel):
    """A wall-clock time, given as {hour, minute} or an "HH:MM" string."""
    hour: int
    minute: int = 0

    @model_validator(mode="before")
    @classmethod
    def parse_string(cls, data: Any) -> Any:
        """Accept "HH:MM" shorthand."""
        if isinstance(data, str):
            try:
                hour, minute = data.strip().split(":")
                return {"hour": int(hour), "minute": int(minute)}
            except ValueError as exc:
                raise ValueError(f"Time must be in HH:MM format, got {data!r}") from exc
        return data

    @field_validator("hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("minute")
    @classmethod
    def validate_minute(cls, v: int) -> int:
        """Validate minute is between 0 and 59."""
        if not 0 <= v <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {v}")
        return v

    def to_domain(self) -> HourMinute:
        return HourMinute(hour=self.hour, minute=self.minute)


class DailyScheduleConfig(BaseModel):
    """Opening hours for one weekday. Leave both sides out for a closed day."""
    open: Optional[HourMinuteConfig] = None
    close: Optional[HourMinuteConfig] = None

    @model_validator(mode="after")
    def validate_open_close(self) -> "DailyScheduleConfig":
        """Ensure the day opens before it closes, without overnight spans."""
        if (self.open is None) != (self.close is None):
            raise ValueError("open and close must be given together")
        if self.open is not None and self.close is not None:
            if (self.close.hour, self.close.minute) <= (self.open.hour, self.open.minute):
                raise ValueError(
                    f"close {self.close.hour:02d}:{self.close.minute:02d} must be later than "
                    f"open {self.open.hour:02d}:{self.open.minute:02d}"
                )
        return self

    def to_domain(self) -> DailySchedule:
        return DailySchedule(
            open=self.open.to_domain() if self.open else None,
            close=self.close.to_domain() if self.close else None,
        )


class SpaceConfig(BaseModel):
    """
    A bookable space. Accepts snake_case keys as well as the camelCase keys
    used by the JSON space records.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    time_zone: str = Field(alias="timeZone")
    minimum_notice: int = Field(default=0, alias="minimumNotice")
    opening_times: Dict[int, DailyScheduleConfig] = Field(default_factory=dict, alias="openingTimes")

    @field_validator("time_zone")
    @classmethod
    def validate_time_zone(cls, value: str) -> str:
        """Ensure the zone exists in the IANA database."""
        try:
            pendulum.timezone(value)
        except (ValueError, KeyError) as exc:
            raise ValueError(f"Unknown time zone: {value!r}") from exc
        return value

    @field_validator("minimum_notice")
    @classmethod
    def validate_minimum_notice(cls, value: int) -> int:
        """Ensure notice is not negative."""
        if value < 0:
            raise ValueError("minimum_notice must not be negative")
        return value

    @field_validator("opening_times")
    @classmethod
    def validate_weekdays(cls, value: Dict[int, DailyScheduleConfig]) -> Dict[int, DailyScheduleConfig]:
        """Ensure weekday keys are 1 (Monday) through 7 (Sunday)."""
        invalid_days = sorted(day for day in value if day not in range(1, 8))
        if invalid_days:
            raise ValueError(f"opening_times weekdays must be between 1 and 7, got {invalid_days}")
        return value

    def to_space(self) -> Space:
        """Build the domain Space for this configuration."""
        return Space(
            time_zone=self.time_zone,
            minimum_notice=self.minimum_notice,
            opening_times={
                Weekday(day): schedule.to_domain()
                for day, schedule in sorted(self.opening_times.items())
            },
            name=self.name,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    spaces: List[SpaceConfig] = Field(default_factory=list)
    fixtures_dir: Optional[Path] = None

    @field_validator("spaces")
    @classmethod
    def validate_spaces(cls, value: List[SpaceConfig]) -> List[SpaceConfig]:
        """Ensure space names are present and unique."""
        seen_names: set[str] = set()
        for space in value:
            if not space.name:
                raise ValueError("Every configured space needs a name")
            name_key = space.name.lower()
            if name_key in seen_names:
                raise ValueError(f"Duplicate space name detected: {space.name}")
            seen_names.add(name_key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative fixtures_dir is resolved against the config file's folder.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.fixtures_dir is not None and not config.fixtures_dir.is_absolute():
            config.fixtures_dir = config_path.parent / config.fixtures_dir
        return config

    def find_space(self, name: str) -> SpaceConfig | None:
        """Find a configured space by name (case-insensitive)."""
        for space in self.spaces:
            if space.name.lower() == name.lower():
                return space
        return None


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
