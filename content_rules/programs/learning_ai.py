"""Daily AI learning tips for the first year, regenerated once a day per user."""

from __future__ import annotations

from typing import Any

from ..ai import LearningContext
from ..conditions import postpartum, scope
from ..context import date_key
from ..models import RuleContext, Scope, Screen, Slot
from ..props import ai_call, ai_text
from ..rules import Program


def build_learning_context(ctx: RuleContext) -> LearningContext:
    baby = ctx.baby
    enhanced = ctx.enhanced_baby_data
    activities = enhanced.activities_24h if enhanced else None
    weekly = enhanced.weekly_patterns if enhanced else None
    return LearningContext(
        baby_name=(baby.first_name if baby and baby.first_name else "Baby"),
        baby_sex=baby.sex if baby else None,
        age_in_days=(baby.age_in_days if baby and baby.age_in_days is not None else 0),
        age_in_weeks=enhanced.baby.age_in_weeks if enhanced else 0,
        first_time_parent=bool(ctx.traits and ctx.traits.first_pregnancy),
        birth_weight_oz=enhanced.baby.birth_weight_oz if enhanced else None,
        current_weight_oz=enhanced.baby.current_weight_oz if enhanced else None,
        height=enhanced.baby.height if enhanced else None,
        feeding_count_24h=activities.feeding_count if activities else None,
        sleep_count_24h=activities.sleep_count if activities else None,
        diaper_count_24h=activities.diaper_count if activities else None,
        avg_feeding_interval=activities.avg_feeding_interval if activities else None,
        total_sleep_hours_24h=activities.total_sleep_hours if activities else None,
        avg_feedings_per_day=weekly.avg_feedings_per_day if weekly else None,
        avg_sleep_hours_per_day=weekly.avg_sleep_hours if weekly else None,
        avg_diaper_changes_per_day=weekly.avg_diaper_changes if weekly else None,
    )


def _user(ctx: RuleContext) -> str:
    return (ctx.traits and ctx.traits.user_id) or "anon"


def _tips_prop(ai: Any, period: str) -> Any:
    return ai_text(
        key=lambda ctx: f"learning:{_user(ctx)}:{period}:{date_key()}",
        ttl="1d",
        call=lambda ctx: ai_call(
            lambda: ai.generate_daily_learning(build_learning_context(ctx)),
            lambda result: [tip.model_dump() for tip in result.tips],
        ),
    )


def create_learning_ai_program(ai: Any) -> Program:
    P = Program()

    # Days 0-112 (about four months)
    P.series.pp_days(
        0,
        112,
        lambda day: (
            P.rule()
            .slot(Screen.LEARNING, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.day.eq(day))
            .show("Tips.Carousel", {"tips": _tips_prop(ai, f"d{day}")})
            .priority(50)
            .build()
        ),
    )

    # Weeks 17-52, once the daily series has run out
    P.series.pp_weeks(
        17,
        52,
        lambda week: (
            P.rule()
            .slot(Screen.LEARNING, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.week.eq(week))
            .show("Tips.Carousel", {"tips": _tips_prop(ai, f"w{week}")})
            .priority(50)
            .build()
        ),
    )

    return P
