"""Derive a RuleContext from a baby record."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

from .models import BabyInfo, EnhancedBabyData, RuleContext, Scope, Traits

FULL_TERM_WEEKS = 40
MAX_PREGNANCY_WEEK = 42


class BabyRecord(BaseModel):
    id: str
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    birth_date: date | None = None
    due_date: date | None = None
    first_pregnancy: bool = True
    progress: dict[str, float] = Field(default_factory=dict)
    done: dict[str, bool] = Field(default_factory=dict)
    stale: dict[str, float] = Field(default_factory=dict)


def season_for(day: date) -> str:
    if 3 <= day.month <= 5:
        return "spring"
    if 6 <= day.month <= 8:
        return "summer"
    if 9 <= day.month <= 11:
        return "fall"
    return "winter"


def date_key(today: date | None = None) -> str:
    """``YYYY-MM-DD`` stamp used to make cache keys roll over daily."""
    return (today or date.today()).isoformat()


def pregnancy_week(due_date: date, today: date) -> int:
    # Whole weeks until the due date, truncated toward zero.
    weeks_left = int((due_date - today).days / 7)
    return max(0, min(MAX_PREGNANCY_WEEK, FULL_TERM_WEEKS - weeks_left))


def build_rule_context(
    baby: BabyRecord,
    enhanced: EnhancedBabyData | None = None,
    now: datetime | None = None,
) -> RuleContext:
    today = (now or datetime.now()).date()

    scope: Scope | None = None
    week: int | None = None
    pp_day: int | None = None
    pp_week: int | None = None
    age_in_days: int | None = None

    if baby.birth_date is not None:
        scope = Scope.POSTPARTUM
        age_in_days = (today - baby.birth_date).days
        pp_day = age_in_days
        pp_week = age_in_days // 7
    elif baby.due_date is not None:
        scope = Scope.PREGNANCY
        week = pregnancy_week(baby.due_date, today)

    return RuleContext(
        scope=scope,
        week=week,
        pp_day=pp_day,
        pp_week=pp_week,
        progress=dict(baby.progress),
        done=dict(baby.done),
        stale=dict(baby.stale),
        baby=BabyInfo(
            sex=baby.gender or "U",
            age_in_days=age_in_days,
            first_name=baby.first_name,
            middle_name=baby.middle_name,
            last_name=baby.last_name,
        ),
        traits=Traits(user_id=baby.id, first_pregnancy=baby.first_pregnancy),
        enhanced_baby_data=enhanced,
        season=season_for(today),
    )
