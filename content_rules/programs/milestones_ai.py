"""AI milestone suggestions, refreshed daily."""

from __future__ import annotations

from typing import Any

from ..ai import MilestoneContext
from ..conditions import postpartum, scope
from ..context import date_key
from ..models import RuleContext, Scope, Screen, Slot
from ..props import ai_call, ai_text
from ..rules import Program
from .learning_ai import build_learning_context


def build_milestone_context(ctx: RuleContext) -> MilestoneContext:
    return MilestoneContext(**build_learning_context(ctx).model_dump())


def _milestones_prop(ai: Any, key_fn) -> Any:
    return ai_text(
        key=key_fn,
        ttl="1d",
        call=lambda ctx: ai_call(
            lambda: ai.generate_milestone_suggestions(build_milestone_context(ctx)),
            lambda result: [m.model_dump() for m in result.milestones],
        ),
    )


def _age_in_days(ctx: RuleContext) -> int:
    return (ctx.baby.age_in_days if ctx.baby and ctx.baby.age_in_days is not None else 0)


def create_milestones_ai_program(ai: Any) -> Program:
    P = Program()

    P.series.pp_days(
        0,
        112,
        lambda day: (
            P.rule()
            .slot(Screen.MILESTONES, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.day.eq(day))
            .show(
                "Tips.Carousel",
                {"tips": _milestones_prop(ai, lambda ctx: f"milestones:{_age_in_days(ctx)}:{date_key()}")},
            )
            .priority(50)
            .build()
        ),
    )

    P.series.pp_weeks(
        17,
        52,
        lambda week: (
            P.rule()
            .slot(Screen.MILESTONES, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.week.eq(week))
            .show(
                "Tips.Carousel",
                {"tips": _milestones_prop(ai, lambda ctx: f"milestones:w{week}:{date_key()}")},
            )
            .priority(50)
            .build()
        ),
    )

    return P
