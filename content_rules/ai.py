"""Claude-backed generators used by AI props in content programs.

Every method returns a validated pydantic model; programs pick the field they
need with :func:`content_rules.props.ai_call`. Failures propagate so the prop
pipeline can record them as ``[AI_ERROR]``.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, TypeVar

import anthropic
from pydantic import BaseModel, Field

from . import prompts
from .config import settings

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


# ---------------------------------------------------------------------------
# Output models
# ---------------------------------------------------------------------------

class TextOutput(BaseModel):
    text: str


class SubtextOutput(BaseModel):
    subtext: str


class SnippetOutput(BaseModel):
    snippet: str


class PromptListOutput(BaseModel):
    prompts: list[str]


class LearningTip(BaseModel):
    title: str
    body: str
    category: str | None = None


class DailyLearningResult(BaseModel):
    tips: list[LearningTip]


class MilestoneSuggestion(BaseModel):
    title: str
    description: str
    type: Literal["physical", "cognitive", "social", "language", "self_care"]
    age_label: str | None = None


class MilestoneResult(BaseModel):
    milestones: list[MilestoneSuggestion]


# ---------------------------------------------------------------------------
# Generator inputs
# ---------------------------------------------------------------------------

class LearningContext(BaseModel):
    baby_name: str = "Baby"
    baby_sex: str | None = None
    age_in_days: int = 0
    age_in_weeks: int = 0
    first_time_parent: bool = False
    birth_weight_oz: float | None = None
    current_weight_oz: float | None = None
    height: float | None = None
    feeding_count_24h: int | None = None
    sleep_count_24h: int | None = None
    diaper_count_24h: int | None = None
    avg_feeding_interval: float | None = None
    total_sleep_hours_24h: float | None = None
    avg_feedings_per_day: float | None = None
    avg_sleep_hours_per_day: float | None = None
    avg_diaper_changes_per_day: float | None = None
    recently_covered_topics: list[str] = Field(default_factory=list)


class MilestoneContext(LearningContext):
    recently_suggested_milestones: list[str] = Field(default_factory=list)


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


class ContentAI:
    """Async generator handle passed to program factories."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: Any | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.anthropic_api_key
        self.model = model or settings.claude_model
        self._client = client

    @property
    def client(self) -> Any:
        # Created on first use so programs can be built without credentials.
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        return self._client

    async def _generate(self, prompt: str, shape: str, output: type[M]) -> M:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=settings.ai_max_tokens,
            system=prompts.build_system_prompt(shape),
            messages=[{"role": "user", "content": prompt}],
        )
        text_parts: list[str] = []
        for block in response.content:
            if getattr(block, "type", None) == "text":
                text_parts.append(block.text)
        raw = _strip_fences("".join(text_parts))
        log.debug("Generated %s (%d chars)", output.__name__, len(raw))
        return output.model_validate_json(raw)

    # ------------------------------------------------------------------
    # Card copy
    # ------------------------------------------------------------------

    async def hospital_pack_advice(self, progress: int) -> SubtextOutput:
        prompt = prompts.HOSPITAL_PACK_ADVICE.format(progress=progress)
        return await self._generate(prompt, prompts.SUBTEXT_SHAPE, SubtextOutput)

    async def pregnancy_week_summary(self, week: int) -> TextOutput:
        prompt = prompts.PREGNANCY_WEEK_SUMMARY.format(week=week)
        return await self._generate(prompt, prompts.TEXT_SHAPE, TextOutput)

    async def postpartum_tips(self, day: int, first_pregnancy: bool) -> TextOutput:
        prompt = prompts.POSTPARTUM_TIPS.format(day=day, first_pregnancy=first_pregnancy)
        return await self._generate(prompt, prompts.TEXT_SHAPE, TextOutput)

    async def newborn_week_milestone(self, week: int, baby_sex: str, first_pregnancy: bool) -> TextOutput:
        prompt = prompts.NEWBORN_WEEK_MILESTONE.format(
            week=week, baby_sex=baby_sex, first_pregnancy=first_pregnancy
        )
        return await self._generate(prompt, prompts.TEXT_SHAPE, TextOutput)

    async def stale_prompts(self, resource: str, season: str) -> PromptListOutput:
        prompt = prompts.STALE_PROMPTS.format(resource=resource.replace("_", " "), season=season)
        return await self._generate(prompt, prompts.PROMPTS_SHAPE, PromptListOutput)

    async def birth_plan_headline(self, mode: str) -> TextOutput:
        prompt = prompts.BIRTH_PLAN_HEADLINE.format(mode=mode)
        return await self._generate(prompt, prompts.TEXT_SHAPE, TextOutput)

    async def appointment_nudge(self, appointment: str) -> TextOutput:
        prompt = prompts.APPOINTMENT_NUDGE.format(appointment=appointment.replace("_", " "))
        return await self._generate(prompt, prompts.TEXT_SHAPE, TextOutput)

    async def baby_visit_explainer(self, week: int) -> TextOutput:
        prompt = prompts.BABY_VISIT_EXPLAINER.format(week=week)
        return await self._generate(prompt, prompts.TEXT_SHAPE, TextOutput)

    async def sleep_regression_tips(self, week: int) -> SnippetOutput:
        prompt = prompts.SLEEP_REGRESSION_TIPS.format(week=week)
        return await self._generate(prompt, prompts.SNIPPET_SHAPE, SnippetOutput)

    # ------------------------------------------------------------------
    # Daily carousels
    # ------------------------------------------------------------------

    async def generate_daily_learning(self, context: LearningContext) -> DailyLearningResult:
        prompt = prompts.DAILY_LEARNING.format(**context.model_dump())
        return await self._generate(prompt, prompts.TIPS_SHAPE, DailyLearningResult)

    async def generate_milestone_suggestions(self, context: MilestoneContext) -> MilestoneResult:
        prompt = prompts.MILESTONE_SUGGESTIONS.format(**context.model_dump())
        return await self._generate(prompt, prompts.MILESTONES_SHAPE, MilestoneResult)
