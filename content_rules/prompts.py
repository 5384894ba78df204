"""Prompt templates for AI-generated card copy."""

_STATIC_TEMPLATE = """\
You write short in-app copy for a baby care tracking app used by expecting and new parents.

Rules:
- Warm, calm, practical. No more than 2 short sentences per text field unless asked otherwise.
- Never give medical advice; for anything clinical, suggest checking with a pediatrician or provider.
- Never use emoji.
- Reply with a single JSON object and nothing else. No markdown fences.\
"""

_OUTPUT_TEMPLATE = """\
Return JSON with exactly this shape:
{shape}\
"""


def build_system_prompt(shape: str) -> list[dict]:
    """Return system content blocks with cache_control on the stable prefix."""
    return [
        {
            "type": "text",
            "text": _STATIC_TEMPLATE,
            "cache_control": {"type": "ephemeral"},
        },
        {
            "type": "text",
            "text": _OUTPUT_TEMPLATE.format(shape=shape),
        },
    ]


TEXT_SHAPE = '{"text": string}'
SUBTEXT_SHAPE = '{"subtext": string}'
SNIPPET_SHAPE = '{"snippet": string}'
PROMPTS_SHAPE = '{"prompts": [string, string, string]}'
TIPS_SHAPE = '{"tips": [{"title": string, "body": string, "category": string}]}'
MILESTONES_SHAPE = (
    '{"milestones": [{"title": string, "description": string, '
    '"type": "physical" | "cognitive" | "social" | "language" | "self_care", "age_label": string}]}'
)

HOSPITAL_PACK_ADVICE = (
    "The parent has packed {progress}% of their hospital bag. "
    "Write one encouraging line about what to finish next."
)
PREGNANCY_WEEK_SUMMARY = "Summarize baby's development at pregnancy week {week} in two sentences."
POSTPARTUM_TIPS = (
    "Give one practical tip for postpartum day {day}. "
    "First-time parent: {first_pregnancy}."
)
NEWBORN_WEEK_MILESTONE = (
    "Describe what a typical baby does in week {week} of life. "
    "Baby sex: {baby_sex}. First-time parent: {first_pregnancy}."
)
STALE_PROMPTS = (
    "The parent has not touched their {resource} checklist in a few days. Season: {season}. "
    "Suggest three short questions they could ask an assistant to get moving again."
)
BIRTH_PLAN_HEADLINE = "Write a short headline inviting the parent to prepare for recovery after a {mode} birth."
APPOINTMENT_NUDGE = "Write one line nudging the parent to book their {appointment} appointment."
BABY_VISIT_EXPLAINER = "Explain what usually happens at the baby's well visit around week {week}, including vaccines."
SLEEP_REGRESSION_TIPS = "Give one short snippet of advice for sleep changes around week {week} after birth."

DAILY_LEARNING = """\
Write 3 learning tips for today for the parents of {baby_name}, {age_in_days} days old ({age_in_weeks} weeks).
First-time parent: {first_time_parent}.
Recent 24h: {feeding_count_24h} feeds, {sleep_count_24h} sleeps ({total_sleep_hours_24h} h), {diaper_count_24h} diapers.
Weekly averages: {avg_feedings_per_day} feeds/day, {avg_sleep_hours_per_day} h sleep/day, {avg_diaper_changes_per_day} diapers/day.
Weight: birth {birth_weight_oz} oz, current {current_weight_oz} oz.
Skip topics already covered: {recently_covered_topics}.\
"""

MILESTONE_SUGGESTIONS = """\
Suggest 3 developmental milestones to watch for in {baby_name}, {age_in_days} days old ({age_in_weeks} weeks), sex {baby_sex}.
Recent 24h: {feeding_count_24h} feeds, {sleep_count_24h} sleeps ({total_sleep_hours_24h} h), {diaper_count_24h} diapers.
Weight: birth {birth_weight_oz} oz, current {current_weight_oz} oz. Height: {height}.
Skip milestones already suggested: {recently_suggested_milestones}.\
"""
