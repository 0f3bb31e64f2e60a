"""Pydantic validation models for all user-facing data entry points."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from crosstrain.services.load_types import (
    ActivityInput,
    AthleteContext,
    HRZoneConfig,
    HRZoneData,
    normalize_race_goal,
)


class HRZoneInput(BaseModel):
    zone1_min: float = Field(default=0.0, ge=0)
    zone2_min: float = Field(default=0.0, ge=0)
    zone3_min: float = Field(default=0.0, ge=0)
    zone4_min: float = Field(default=0.0, ge=0)
    zone5_min: float = Field(default=0.0, ge=0)

    def to_zone_data(self) -> HRZoneData:
        return HRZoneData(
            zone1_min=self.zone1_min,
            zone2_min=self.zone2_min,
            zone3_min=self.zone3_min,
            zone4_min=self.zone4_min,
            zone5_min=self.zone5_min,
        )


class ActivityLogInput(BaseModel):
    sport: str = Field(min_length=1, max_length=80)
    duration_min: float = Field(ge=0, le=1440)
    rpe: Optional[int] = Field(default=None, ge=1, le=10)
    garmin_aerobic_load: Optional[float] = Field(default=None, ge=0)
    garmin_anaerobic_load: Optional[float] = Field(default=None, ge=0)
    hr_zones: Optional[HRZoneInput] = None
    avg_hr: Optional[int] = Field(default=None, ge=30, le=250)
    day_index: Optional[int] = Field(default=None, ge=0, le=6)
    activity_id: Optional[str] = Field(default=None, max_length=120)

    @field_validator("sport")
    @classmethod
    def sport_not_blank(cls, v):
        if not v.strip():
            raise ValueError("sport must not be blank")
        return v.strip()

    @field_validator("hr_zones")
    @classmethod
    def zones_fit_duration(cls, v, info):
        duration = info.data.get("duration_min")
        # Allow a minute of rounding slack from watch exports
        if v is not None and duration is not None and v.to_zone_data().total_min > duration + 1:
            raise ValueError("time in HR zones cannot exceed duration_min")
        return v

    def to_activity(self) -> ActivityInput:
        return ActivityInput(
            sport=self.sport,
            duration_min=self.duration_min,
            rpe=self.rpe,
            garmin_aerobic_load=self.garmin_aerobic_load,
            garmin_anaerobic_load=self.garmin_anaerobic_load,
            hr_zones=self.hr_zones.to_zone_data() if self.hr_zones else None,
            avg_hr=self.avg_hr,
            day_index=self.day_index,
            activity_id=self.activity_id,
        )


class PlannedWorkoutInput(BaseModel):
    id: str = Field(min_length=1, max_length=120)
    day: int = Field(ge=0, le=6)
    type: str = Field(min_length=1, max_length=40)
    description: str = Field(default="", max_length=500)
    status: str = "planned"
    rpe: Optional[int] = Field(default=None, ge=1, le=10)
    aerobic_load: Optional[float] = Field(default=None, ge=0)
    anaerobic_load: Optional[float] = Field(default=None, ge=0)

    @field_validator("status")
    @classmethod
    def valid_status(cls, v):
        allowed = {"planned", "reduced", "replaced", "skipped"}
        if v not in allowed:
            raise ValueError(f"status must be one of {allowed}")
        return v


class AthleteContextInput(BaseModel):
    race_goal: str = "half"
    injury_mode: bool = False
    easy_pace_sec_per_km: Optional[int] = Field(default=None, ge=150, le=900)
    max_hr: Optional[int] = Field(default=None, ge=100, le=250)
    resting_hr: Optional[int] = Field(default=None, ge=25, le=120)

    @field_validator("race_goal")
    @classmethod
    def valid_race_goal(cls, v):
        allowed = {"5k", "10k", "half", "half marathon", "marathon"}
        if v.strip().lower() not in allowed:
            raise ValueError(f"race_goal must be one of {allowed}")
        return normalize_race_goal(v)

    @field_validator("resting_hr")
    @classmethod
    def resting_below_max(cls, v, info):
        max_hr = info.data.get("max_hr")
        if v is not None and max_hr is not None and v >= max_hr:
            raise ValueError("resting_hr must be < max_hr")
        return v

    def to_context(self) -> AthleteContext:
        hr_config = None
        if self.max_hr is not None and self.resting_hr is not None:
            hr_config = HRZoneConfig(max_hr=self.max_hr, resting_hr=self.resting_hr)
        return AthleteContext(
            race_goal=self.race_goal,
            injury_mode=self.injury_mode,
            easy_pace_sec_per_km=self.easy_pace_sec_per_km,
            hr_zone_config=hr_config,
        )
