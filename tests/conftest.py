from __future__ import annotations

from typing import Any

import pytest

from content_rules.ai import (
    DailyLearningResult,
    LearningTip,
    MilestoneResult,
    MilestoneSuggestion,
    PromptListOutput,
    SnippetOutput,
    SubtextOutput,
    TextOutput,
)


class FakeAI:
    """Stands in for ContentAI; records every call and returns canned output."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    async def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.fail:
            raise RuntimeError(f"{name} unavailable")

    async def hospital_pack_advice(self, progress: int) -> SubtextOutput:
        await self._record("hospital_pack_advice", progress)
        return SubtextOutput(subtext=f"Pack the rest ({progress}%)")

    async def pregnancy_week_summary(self, week: int) -> TextOutput:
        await self._record("pregnancy_week_summary", week)
        return TextOutput(text=f"Week {week} summary")

    async def postpartum_tips(self, day: int, first_pregnancy: bool) -> TextOutput:
        await self._record("postpartum_tips", day, first_pregnancy)
        return TextOutput(text=f"Day {day} tip")

    async def newborn_week_milestone(self, week: int, baby_sex: str, first_pregnancy: bool) -> TextOutput:
        await self._record("newborn_week_milestone", week, baby_sex, first_pregnancy)
        return TextOutput(text=f"Baby week {week}")

    async def stale_prompts(self, resource: str, season: str) -> PromptListOutput:
        await self._record("stale_prompts", resource, season)
        return PromptListOutput(prompts=["What is left to pack?", "Snacks for labor?"])

    async def birth_plan_headline(self, mode: str) -> TextOutput:
        await self._record("birth_plan_headline", mode)
        return TextOutput(text=f"Recovery after a {mode} birth")

    async def appointment_nudge(self, appointment: str) -> TextOutput:
        await self._record("appointment_nudge", appointment)
        return TextOutput(text="Book it")

    async def baby_visit_explainer(self, week: int) -> TextOutput:
        await self._record("baby_visit_explainer", week)
        return TextOutput(text="What to expect")

    async def sleep_regression_tips(self, week: int) -> SnippetOutput:
        await self._record("sleep_regression_tips", week)
        return SnippetOutput(snippet="Keep bedtime consistent")

    async def generate_daily_learning(self, context) -> DailyLearningResult:
        await self._record("generate_daily_learning", context)
        return DailyLearningResult(
            tips=[LearningTip(title="Tummy time", body="A few minutes, several times a day.", category="development")]
        )

    async def generate_milestone_suggestions(self, context) -> MilestoneResult:
        await self._record("generate_milestone_suggestions", context)
        return MilestoneResult(
            milestones=[
                MilestoneSuggestion(
                    title="Follows faces",
                    description="Tracks your face side to side.",
                    type="cognitive",
                    age_label="Week 3",
                )
            ]
        )


@pytest.fixture
def fake_ai() -> FakeAI:
    return FakeAI()
