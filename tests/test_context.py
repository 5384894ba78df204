from __future__ import annotations

from datetime import date, datetime

from content_rules.context import BabyRecord, build_rule_context, date_key, pregnancy_week, season_for
from content_rules.models import Scope


def test_birth_date_means_postpartum() -> None:
    baby = BabyRecord(id="baby-1", first_name="Ada", gender="F", birth_date=date(2025, 1, 1))
    ctx = build_rule_context(baby, now=datetime(2025, 1, 8, 9, 30))
    assert ctx.scope is Scope.POSTPARTUM
    assert ctx.pp_day == 7
    assert ctx.pp_week == 1
    assert ctx.week is None
    assert ctx.baby.age_in_days == 7
    assert ctx.baby.sex == "F"
    assert ctx.traits.user_id == "baby-1"
    assert ctx.season == "winter"


def test_due_date_means_pregnancy() -> None:
    baby = BabyRecord(id="baby-1", due_date=date(2025, 3, 1), first_pregnancy=False)
    ctx = build_rule_context(baby, now=datetime(2025, 1, 4))
    assert ctx.scope is Scope.PREGNANCY
    assert ctx.week == 32
    assert ctx.pp_day is None
    assert ctx.baby.sex == "U"
    assert ctx.traits.first_pregnancy is False


def test_no_dates_leaves_scope_empty() -> None:
    ctx = build_rule_context(BabyRecord(id="baby-1", progress={"hospital_bag": 25}), now=datetime(2025, 7, 1))
    assert ctx.scope is None
    assert ctx.progress == {"hospital_bag": 25}
    assert ctx.season == "summer"


def test_pregnancy_week_is_clamped() -> None:
    today = date(2025, 1, 1)
    assert pregnancy_week(date(2025, 1, 1), today) == 40
    assert pregnancy_week(date(2024, 12, 22), today) == 41
    assert pregnancy_week(date(2024, 11, 1), today) == 42
    assert pregnancy_week(date(2025, 12, 1), today) == 0


def test_seasons() -> None:
    assert season_for(date(2025, 3, 1)) == "spring"
    assert season_for(date(2025, 8, 31)) == "summer"
    assert season_for(date(2025, 11, 30)) == "fall"
    assert season_for(date(2025, 12, 1)) == "winter"
    assert season_for(date(2025, 2, 28)) == "winter"


def test_date_key() -> None:
    assert date_key(date(2025, 1, 9)) == "2025-01-09"
