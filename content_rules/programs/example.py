"""Learning content for expecting and new parents.

Mixes fixed copy, computed headlines and AI-written text. Daily postpartum
tips (priority 45) and baby-week summaries (priority 44) share the learning
header; more specific one-off cards sit above them.
"""

from __future__ import annotations

from typing import Any

from ..conditions import (
    not_done,
    postpartum,
    progress,
    scope,
    stale,
    week,
)
from ..models import DoneKey, ProgressKey, RuleContext, Scope, Screen, Slot
from ..props import ai_call, ai_prompt_list, ai_text, compute
from ..rules import Program

STALE_BAG_MINUTES = 3 * 24 * 60


def _progress(ctx: RuleContext, key: ProgressKey) -> int:
    return round((ctx.progress or {}).get(key.value, 0))


def _hospital_headline(ctx: RuleContext) -> str:
    pct = _progress(ctx, ProgressKey.HOSPITAL_BAG)
    return f"Finish packing, ~{100 - pct}% left" if pct else "Start packing"


def _partner_headline(ctx: RuleContext) -> str:
    pct = _progress(ctx, ProgressKey.NURSERY_ESSENTIALS)
    who = ctx.traits.partner_name if ctx.traits and ctx.traits.partner_name else "your partner"
    return f"{who} can help, ~{100 - pct}% left"


def create_example_program(ai: Any) -> Program:
    P = Program()

    # ---- TTC ----
    P.add(
        P.rule()
        .slot(Screen.LEARNING, Slot.HEADER)
        .when(scope(Scope.TTC))
        .show("Card.Hidden", {})
        .priority(10)
        .build()
    )

    # ---- Pregnancy ----
    P.add(
        P.rule()
        .slot(Screen.PREGNANCY, Slot.CALLOUT)
        .when(scope(Scope.PREGNANCY), week.between(28, 32), not_done(DoneKey.NURSERY_SETUP))
        .show("CTA.GoTo", {"deeplink": "nugget://nursery-prep", "headline": "Start your nursery"})
        .priority(60)
        .build()
    )

    P.add(
        P.rule()
        .slot(Screen.HOSPITAL, Slot.CALLOUT)
        .when(scope(Scope.PREGNANCY), week.gte(35), progress(ProgressKey.HOSPITAL_BAG).lt(100))
        .show(
            "CTA.GoTo",
            {
                "deeplink": "nugget://hospital-prep",
                "headline": compute(_hospital_headline),
                "subtext": ai_text(
                    key=lambda ctx: f"pack-sub:{_progress(ctx, ProgressKey.HOSPITAL_BAG)}",
                    ttl="1d",
                    call=lambda ctx: ai_call(
                        lambda: ai.hospital_pack_advice(_progress(ctx, ProgressKey.HOSPITAL_BAG)),
                        lambda out: out.subtext,
                    ),
                ),
            },
        )
        .priority(70)
        .build()
    )

    P.add(
        P.rule()
        .slot(Screen.PREGNANCY, Slot.HEADER)
        .when(scope(Scope.PREGNANCY), week.eq(30))
        .show(
            "Card.WeekSummary",
            {
                "body": ai_text(
                    key=lambda ctx: "dev-w30",
                    ttl="14d",
                    call=lambda ctx: ai_call(lambda: ai.pregnancy_week_summary(30), lambda out: out.text),
                ),
                "title": "Week 30",
            },
        )
        .priority(55)
        .build()
    )

    P.add(
        P.rule()
        .slot(Screen.PREGNANCY, Slot.CALLOUT)
        .when(scope(Scope.PREGNANCY), week.eq(39))
        .show(
            "Nav.Directive",
            {
                "cooldown": "3d",
                "deeplink": "nugget://plans/birth?source=wk39",
                "key": "wk39-birth-plan",
                "mode": "cta",
                "valid": "7d",
            },
        )
        .priority(80)
        .build()
    )

    # ---- Postpartum daily tips, days 0-14 ----
    def daily_tip(day: int):
        def call(ctx: RuleContext):
            first = bool(ctx.traits and ctx.traits.first_pregnancy)
            return ai_call(lambda: ai.postpartum_tips(day, first), lambda out: out.text)

        return (
            P.rule()
            .slot(Screen.LEARNING, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.day.eq(day))
            .show(
                "Card.WeekSummary",
                {
                    "body": ai_text(
                        key=lambda ctx: f"pp-tip:{(ctx.traits and ctx.traits.user_id) or 'anon'}:d{day}",
                        ttl="7d",
                        call=call,
                    ),
                    "title": compute(lambda ctx: f"Day {day}"),
                },
            )
            .priority(45)
            .build()
        )

    P.series.pp_days(0, 14, daily_tip)

    # ---- Postpartum baby weeks 0-12 ----
    def baby_week(w: int):
        def call(ctx: RuleContext):
            sex = (ctx.baby and ctx.baby.sex) or "U"
            first = bool(ctx.traits and ctx.traits.first_pregnancy)
            return ai_call(lambda: ai.newborn_week_milestone(w, sex, first), lambda out: out.text)

        return (
            P.rule()
            .slot(Screen.LEARNING, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.week.eq(w))
            .show(
                "Card.WeekSummary",
                {
                    "body": ai_text(key=lambda ctx: f"baby-week:{w}", ttl="30d", call=call),
                    "title": f"Baby Week {w}",
                },
            )
            .priority(44)
            .build()
        )

    P.series.pp_weeks(0, 12, lambda week: baby_week(week))

    # ---- Re-engagement ----
    P.add(
        P.rule()
        .slot(Screen.AI_CHAT, Slot.CAROUSEL)
        .when(progress(ProgressKey.HOSPITAL_BAG).lt(100), stale("hospital_bag", STALE_BAG_MINUTES))
        .show(
            "Carousel.PromptList",
            {
                "prompts": ai_prompt_list(
                    key=lambda ctx: "prompts:bag:stale",
                    ttl="1d",
                    call=lambda ctx: ai_call(
                        lambda: ai.stale_prompts("hospital_bag", ctx.season or "unknown"),
                        lambda out: "||".join(out.prompts),
                    ),
                ),
            },
        )
        .priority(35)
        .build()
    )

    # ---- Birth plan ----
    P.add(
        P.rule()
        .slot(Screen.LEARNING, Slot.CALLOUT)
        .when(scope(Scope.PREGNANCY), week.gte(36))
        .show(
            "CTA.GoTo",
            {
                "deeplink": "nugget://learning/recovery-prep",
                "headline": ai_text(
                    key=lambda ctx: (
                        "cs-headline"
                        if ctx.traits and ctx.traits.c_section_planned
                        else "vaginal-headline"
                    ),
                    ttl="30d",
                    call=lambda ctx: ai_call(
                        lambda: ai.birth_plan_headline(
                            "csection" if ctx.traits and ctx.traits.c_section_planned else "vaginal"
                        ),
                        lambda out: out.text,
                    ),
                ),
            },
        )
        .priority(50)
        .build()
    )

    # ---- Partner ----
    P.add(
        P.rule()
        .slot(Screen.NURSERY, Slot.CALLOUT)
        .when(progress(ProgressKey.NURSERY_ESSENTIALS).lt(100))
        .show("CTA.GoTo", {"deeplink": "nugget://nursery-prep", "headline": compute(_partner_headline)})
        .priority(52)
        .build()
    )

    # ---- Appointments ----
    P.add(
        P.rule()
        .slot(Screen.LEARNING, Slot.CALLOUT)
        .when(scope(Scope.POSTPARTUM), postpartum.week.eq(6))
        .show(
            "CTA.GoTo",
            {
                "deeplink": "nugget://calendar/postpartum-check",
                "headline": "Schedule your 6-week check",
                "subtext": ai_text(
                    key=lambda ctx: "pp-6w-microcopy",
                    ttl="14d",
                    call=lambda ctx: ai_call(lambda: ai.appointment_nudge("postpartum_6w"), lambda out: out.text),
                ),
            },
        )
        .priority(58)
        .build()
    )

    P.add(
        P.rule()
        .slot(Screen.LEARNING, Slot.HEADER)
        .when(scope(Scope.POSTPARTUM), postpartum.week.eq(8))
        .show(
            "Card.WeekSummary",
            {
                "body": ai_text(
                    key=lambda ctx: "baby-vax-2m",
                    ttl="30d",
                    call=lambda ctx: ai_call(lambda: ai.baby_visit_explainer(8), lambda out: out.text),
                ),
                "title": "2-month visit",
            },
        )
        .priority(46)
        .build()
    )

    # ---- Sleep regressions ----
    for w in (4, 8):
        P.add(
            P.rule()
            .slot(Screen.LEARNING, Slot.CALLOUT)
            .when(scope(Scope.POSTPARTUM), postpartum.week.eq(w))
            .show(
                "CTA.GoTo",
                {
                    "deeplink": "nugget://learning/sleep",
                    "headline": f"Sleep tips for week {w}",
                    "subtext": ai_text(
                        key=lambda ctx, w=w: f"sleep-reg:{w}",
                        ttl="14d",
                        call=lambda ctx, w=w: ai_call(
                            lambda: ai.sleep_regression_tips(w), lambda out: out.snippet
                        ),
                    ),
                },
            )
            .priority(47)
            .build()
        )

    # ---- Milestone capture ----
    P.add(
        P.rule()
        .slot(Screen.AI_CHAT, Slot.CAROUSEL)
        .when(scope(Scope.POSTPARTUM), postpartum.week.eq(6))
        .show(
            "Carousel.PromptList",
            {
                "prompts": [
                    "Log baby's first smile",
                    "Upload a photo from this week",
                    "Add a note about tummy time",
                ],
            },
        )
        .priority(34)
        .build()
    )

    return P
