from __future__ import annotations

import asyncio
import time

from conftest import FakeAI

from content_rules.cache import InMemoryCache
from content_rules.context import date_key
from content_rules.matcher import match_rule, pick_for_slot
from content_rules.models import RuleContext, Scope, Screen, Slot, Traits
from content_rules.programs.celebrations import CELEBRATION_PRIORITY, create_celebrations_program
from content_rules.programs.example import create_example_program
from content_rules.programs.learning_ai import create_learning_ai_program
from content_rules.programs.milestones import create_milestones_program
from content_rules.programs.milestones_ai import create_milestones_ai_program
from content_rules.programs.registry import build_rules


def _postpartum(day: int, **kwargs) -> RuleContext:
    return RuleContext(scope=Scope.POSTPARTUM, pp_day=day, pp_week=day // 7, **kwargs)


def test_program_sizes(fake_ai) -> None:
    assert len(create_celebrations_program(fake_ai)) == 22
    assert len(create_milestones_program(fake_ai)) == 38
    assert len(create_example_program(fake_ai)) == 41
    assert len(create_learning_ai_program(fake_ai)) == 113 + 36
    assert len(create_milestones_ai_program(fake_ai)) == 113 + 36
    assert len(build_rules(fake_ai)) == 22 + 38 + 41 + 149 + 149


def test_programs_build_without_calling_ai(fake_ai) -> None:
    build_rules(fake_ai)
    assert fake_ai.calls == []


def test_celebrations_sit_at_the_top(fake_ai) -> None:
    rules = create_celebrations_program(fake_ai).build()
    assert {r.priority for r in rules} == {CELEBRATION_PRIORITY}
    rule = match_rule(rules, Screen.PARENT_DASHBOARD, Slot.HEADER, _postpartum(7))
    assert rule.content.props["title"] == "🎉 Happy 1 Week Birthday!"
    assert rule.content.props["ageLabel"] == "1 Week Old!"
    rule = match_rule(rules, Screen.PARENT_DASHBOARD, Slot.HEADER, _postpartum(14))
    assert rule.content.props["ageLabel"] == "2 Weeks Old!"
    rule = match_rule(rules, Screen.PARENT_DASHBOARD, Slot.HEADER, _postpartum(365))
    assert rule.content.props["celebrationType"] == "year_1"
    assert match_rule(rules, Screen.PARENT_DASHBOARD, Slot.HEADER, _postpartum(8)) is None


def test_named_milestone_beats_generated_series(fake_ai) -> None:
    rules = build_rules(fake_ai)
    found = asyncio.run(pick_for_slot(rules, Screen.MILESTONES, Slot.HEADER, _postpartum(7), InMemoryCache()))
    assert found.template == "Card.Milestone"
    assert found.props["title"] == "First Week Complete"
    assert fake_ai.calls == []

    day_one = match_rule(rules, Screen.MILESTONES, Slot.HEADER, _postpartum(1))
    assert day_one.content.props["title"] == "First Successful Feeding"


def test_milestone_series_fills_the_gaps(fake_ai) -> None:
    rules = build_rules(fake_ai)
    found = asyncio.run(pick_for_slot(rules, Screen.MILESTONES, Slot.HEADER, _postpartum(100), InMemoryCache()))
    assert found.template == "Tips.Carousel"
    assert found.props["tips"][0]["title"] == "Follows faces"


def test_learning_carousel_outranks_daily_tip(fake_ai) -> None:
    rules = build_rules(fake_ai)
    cache = InMemoryCache()
    ctx = _postpartum(7, traits=Traits(user_id="baby-1"))

    found = asyncio.run(pick_for_slot(rules, Screen.LEARNING, Slot.HEADER, ctx, cache))
    assert found.template == "Tips.Carousel"
    assert found.props["tips"] == [
        {"title": "Tummy time", "body": "A few minutes, several times a day.", "category": "development"}
    ]
    entry = asyncio.run(cache.get(f"learning:baby-1:d7:{date_key()}"))
    assert entry is not None

    learning_context = fake_ai.calls[0][1][0]
    assert learning_context.age_in_days == 0
    assert learning_context.baby_name == "Baby"


def test_hospital_callout_mixes_compute_and_ai(fake_ai) -> None:
    rules = build_rules(fake_ai)
    ctx = RuleContext(scope=Scope.PREGNANCY, week=36, progress={"hospital_bag": 40})
    found = asyncio.run(pick_for_slot(rules, Screen.HOSPITAL, Slot.CALLOUT, ctx, InMemoryCache()))
    assert found.props == {
        "deeplink": "nugget://hospital-prep",
        "headline": "Finish packing, ~60% left",
        "subtext": "Pack the rest (40%)",
    }


def test_nursery_callout_hides_once_done(fake_ai) -> None:
    rules = build_rules(fake_ai)
    ctx = RuleContext(scope=Scope.PREGNANCY, week=30)
    assert match_rule(rules, Screen.PREGNANCY, Slot.CALLOUT, ctx).content.template == "CTA.GoTo"
    done_ctx = RuleContext(scope=Scope.PREGNANCY, week=30, done={"nursery_setup": True})
    assert match_rule(rules, Screen.PREGNANCY, Slot.CALLOUT, done_ctx) is None


def test_stale_hospital_bag_prompts(fake_ai) -> None:
    rules = build_rules(fake_ai)
    four_days_ago = time.time() * 1000 - 4 * 24 * 60 * 60 * 1000
    ctx = RuleContext(
        scope=Scope.PREGNANCY,
        week=34,
        progress={"hospital_bag": 50},
        stale={"hospital_bag": four_days_ago},
        season="fall",
    )
    found = asyncio.run(pick_for_slot(rules, Screen.AI_CHAT, Slot.CAROUSEL, ctx, InMemoryCache()))
    assert found.template == "Carousel.PromptList"
    assert found.props["prompts"] == ["What is left to pack?", "Snacks for labor?"]
    assert fake_ai.calls == [("stale_prompts", ("hospital_bag", "fall"))]


def test_failing_ai_degrades_to_placeholder() -> None:
    ai = FakeAI(fail=True)
    rules = build_rules(ai)
    ctx = RuleContext(scope=Scope.PREGNANCY, week=30)
    found = asyncio.run(pick_for_slot(rules, Screen.PREGNANCY, Slot.HEADER, ctx, InMemoryCache()))
    assert found.props == {"body": "[AI_ERROR]", "title": "Week 30"}


def test_ttc_hides_learning_header(fake_ai) -> None:
    rule = match_rule(build_rules(fake_ai), Screen.LEARNING, Slot.HEADER, RuleContext(scope=Scope.TTC))
    assert rule.content.template == "Card.Hidden"
