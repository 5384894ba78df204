"""Enums and the immutable context snapshot rules are evaluated against."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Screen(str, Enum):
    LEARNING = "learning"
    MILESTONES = "milestones"
    PREGNANCY = "pregnancy"
    HOSPITAL = "hospital"
    NURSERY = "nursery"
    AI_CHAT = "ai_chat"
    PARENT_DASHBOARD = "parent_dashboard"
    MOM_WELLNESS = "mom_wellness"
    PARTNER_SUPPORT = "partner_support"


class Slot(str, Enum):
    HEADER = "header"
    CALLOUT = "callout"
    CAROUSEL = "carousel"
    DAILY_CHECKIN = "daily_checkin"
    WEEKLY_ASSESSMENT = "weekly_assessment"
    TASK_SUGGESTIONS = "task_suggestions"
    QUICK_TIPS = "quick_tips"


class Scope(str, Enum):
    TTC = "ttc"
    PREGNANCY = "pregnancy"
    POSTPARTUM = "postpartum"


class ProgressKey(str, Enum):
    HOSPITAL_BAG = "hospital_bag"
    NURSERY_ESSENTIALS = "nursery_essentials"


class DoneKey(str, Enum):
    NURSERY_SETUP = "nursery_setup"


ParentRole = Literal["primary", "partner", "caregiver"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Traits(_Frozen):
    user_id: str | None = None
    first_pregnancy: bool | None = None
    partner_name: str | None = None
    c_section_planned: bool | None = None


class BabyInfo(_Frozen):
    sex: str | None = None
    age_in_days: int | None = None
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None


class BabyGrowth(_Frozen):
    age_in_days: int
    age_in_weeks: int
    current_weight_oz: float | None = None
    birth_weight_oz: float | None = None
    height: float | None = None
    head_circumference: float | None = None


class ActivitySummary(_Frozen):
    feeding_count: int = 0
    sleep_count: int = 0
    diaper_count: int = 0
    avg_feeding_interval: float = 0.0
    total_sleep_hours: float = 0.0


class WeeklyPatterns(_Frozen):
    avg_feedings_per_day: float = 0.0
    avg_sleep_hours: float = 0.0
    avg_diaper_changes: float = 0.0


class EnhancedBabyData(_Frozen):
    baby: BabyGrowth
    activities_24h: ActivitySummary = Field(default_factory=ActivitySummary)
    weekly_patterns: WeeklyPatterns = Field(default_factory=WeeklyPatterns)


class CheckIn(_Frozen):
    date: datetime
    mood_score: int
    concerns_raised: list[str] = Field(default_factory=list)


class ParentInfo(_Frozen):
    user_id: str
    role: ParentRole = "primary"
    is_mom: bool = False
    is_dad: bool = False
    sleep_hours_24h: float | None = None
    sleep_hours_7d: float | None = None
    last_check_in_date: datetime | None = None
    check_in_streak: int | None = None
    last_wellness_score: float | None = None
    last_wellness_date: datetime | None = None
    check_in_history: list[CheckIn] | None = None


class RuleContext(_Frozen):
    """Point-in-time view of the viewer and baby. Every field is optional."""

    scope: Scope | None = None
    week: int | None = None
    pp_day: int | None = None
    pp_week: int | None = None
    progress: dict[str, float] | None = None
    done: dict[str, bool] | None = None
    # resource name -> last touched, epoch milliseconds
    stale: dict[str, float] | None = None
    traits: Traits | None = None
    baby: BabyInfo | None = None
    enhanced_baby_data: EnhancedBabyData | None = None
    season: str | None = None
    parent: ParentInfo | None = None


class SlotContent(BaseModel):
    """Fully resolved payload handed to the template layer."""

    template: str
    props: dict[str, Any]
