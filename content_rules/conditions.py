"""Condition algebra: typed predicates over a RuleContext plus and/or/not.

Conditions are plain frozen dataclasses built through the small factory
objects below (``week.between(28, 32)``, ``postpartum.day.eq(7)``,
``progress(ProgressKey.HOSPITAL_BAG).lt(100)``) and evaluated with
:func:`eval_cond`.  Evaluation never mutates the context and depends only on
the condition, the context and the clock reading used for staleness checks.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from .models import DoneKey, ParentRole, ProgressKey, RuleContext, Scope

CompareOp = Literal["eq", "gte", "lte", "lt", "between"]

# Context attributes a Compare condition may read.
_TIMELINE_FIELDS = ("week", "pp_day", "pp_week")


def _key(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else value


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Compare:
    """Numeric comparison on a timeline field or on one progress entry."""

    field: str
    op: CompareOp
    value: float
    upper: float | None = None
    key: str | None = None


@dataclass(frozen=True)
class ScopeIs:
    scope: Scope


@dataclass(frozen=True)
class DoneIs:
    key: str
    expected: bool


@dataclass(frozen=True)
class Stale:
    key: str
    minutes: float


@dataclass(frozen=True)
class ParentRoleIs:
    role: ParentRole


@dataclass(frozen=True)
class ParentFlag:
    flag: Literal["is_mom", "is_dad"]
    value: bool


@dataclass(frozen=True)
class ParentSleepBelow:
    hours: float
    days: int


@dataclass(frozen=True)
class CheckInOverdue:
    hours: float


@dataclass(frozen=True)
class WellnessScoreBelow:
    score: float


@dataclass(frozen=True)
class FirstCheckIn:
    value: bool


@dataclass(frozen=True)
class ConcernRaised:
    concern: str


@dataclass(frozen=True)
class AllOf:
    conditions: tuple[Condition, ...]


@dataclass(frozen=True)
class AnyOf:
    conditions: tuple[Condition, ...]


@dataclass(frozen=True)
class Not:
    condition: Condition


Condition = Union[
    Compare,
    ScopeIs,
    DoneIs,
    Stale,
    ParentRoleIs,
    ParentFlag,
    ParentSleepBelow,
    CheckInOverdue,
    WellnessScoreBelow,
    FirstCheckIn,
    ConcernRaised,
    AllOf,
    AnyOf,
    Not,
]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

class _Comparisons:
    """Comparison factory bound to one context field (and progress key)."""

    def __init__(self, field: str, key: str | None = None) -> None:
        self._field = field
        self._key = key

    def _make(self, op: CompareOp, value: float, upper: float | None = None) -> Compare:
        return Compare(field=self._field, op=op, value=value, upper=upper, key=self._key)

    def eq(self, value: float) -> Compare:
        return self._make("eq", value)

    def gte(self, value: float) -> Compare:
        return self._make("gte", value)

    def lte(self, value: float) -> Compare:
        return self._make("lte", value)

    def lt(self, value: float) -> Compare:
        return self._make("lt", value)

    def between(self, low: float, high: float) -> Compare:
        """Inclusive on both ends."""
        if low > high:
            raise ValueError(f"between() lower bound {low} exceeds upper bound {high}")
        return self._make("between", low, high)


class _Postpartum:
    def __init__(self) -> None:
        self.day = _Comparisons("pp_day")
        self.week = _Comparisons("pp_week")


week = _Comparisons("week")
postpartum = _Postpartum()


def scope(value: Scope) -> ScopeIs:
    return ScopeIs(Scope(value))


def progress(key: ProgressKey | str) -> _Comparisons:
    return _Comparisons("progress", key=_key(key))


def done(key: DoneKey | str) -> DoneIs:
    return DoneIs(_key(key), True)


def not_done(key: DoneKey | str) -> DoneIs:
    return DoneIs(_key(key), False)


def stale(name: str, threshold_minutes: float) -> Stale:
    return Stale(_key(name), threshold_minutes)


class _Parent:
    @staticmethod
    def role(value: ParentRole) -> ParentRoleIs:
        return ParentRoleIs(value)

    @staticmethod
    def is_mom(value: bool = True) -> ParentFlag:
        return ParentFlag("is_mom", value)

    @staticmethod
    def is_dad(value: bool = True) -> ParentFlag:
        return ParentFlag("is_dad", value)

    @staticmethod
    def sleep_below(hours: float, days: int) -> ParentSleepBelow:
        """Average nightly sleep over ``days`` days is under ``hours``."""
        if days <= 0:
            raise ValueError(f"sleep_below() needs a positive day count, got {days}")
        return ParentSleepBelow(hours, days)

    @staticmethod
    def check_in_overdue(hours: float) -> CheckInOverdue:
        return CheckInOverdue(hours)

    @staticmethod
    def wellness_score_below(score: float) -> WellnessScoreBelow:
        return WellnessScoreBelow(score)

    @staticmethod
    def first_check_in(value: bool = True) -> FirstCheckIn:
        return FirstCheckIn(value)

    @staticmethod
    def concern_raised(concern: str) -> ConcernRaised:
        return ConcernRaised(concern)


parent = _Parent()


def and_(*conditions: Condition) -> AllOf:
    return AllOf(tuple(conditions))


def or_(*conditions: Condition) -> AnyOf:
    return AnyOf(tuple(conditions))


def not_(condition: Condition) -> Not:
    return Not(condition)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def _compare(op: CompareOp, actual: float, value: float, upper: float | None) -> bool:
    if op == "eq":
        return actual == value
    if op == "gte":
        return actual >= value
    if op == "lte":
        return actual <= value
    if op == "lt":
        return actual < value
    if op == "between":
        return value <= actual <= (upper if upper is not None else value)
    raise ValueError(f"Unknown comparison operator: {op!r}")


def _eval_compare(cond: Compare, ctx: RuleContext) -> bool:
    if cond.field == "progress":
        # Untracked progress counts as not started.
        actual = (ctx.progress or {}).get(cond.key or "", 0)
        return _compare(cond.op, actual, cond.value, cond.upper)
    if cond.field not in _TIMELINE_FIELDS:
        raise ValueError(f"Unknown comparison field: {cond.field!r}")
    actual = getattr(ctx, cond.field)
    if actual is None:
        return False
    return _compare(cond.op, actual, cond.value, cond.upper)


def eval_cond(cond: Condition, ctx: RuleContext, now_ms: float | None = None) -> bool:
    """Evaluate ``cond`` against ``ctx``.

    ``now_ms`` pins the clock used by staleness and check-in checks; it
    defaults to the current wall time and is read once per top-level call so
    nested conditions agree with each other.
    """
    if now_ms is None:
        now_ms = time.time() * 1000

    if isinstance(cond, Compare):
        return _eval_compare(cond, ctx)

    if isinstance(cond, ScopeIs):
        return ctx.scope == cond.scope

    if isinstance(cond, DoneIs):
        is_done = (ctx.done or {}).get(cond.key) is True
        return is_done if cond.expected else not is_done

    if isinstance(cond, Stale):
        last_touched = (ctx.stale or {}).get(cond.key)
        if last_touched is None:
            return False
        return now_ms - last_touched >= cond.minutes * 60_000

    if isinstance(cond, ParentRoleIs):
        return ctx.parent is not None and ctx.parent.role == cond.role

    if isinstance(cond, ParentFlag):
        return ctx.parent is not None and getattr(ctx.parent, cond.flag) == cond.value

    if isinstance(cond, ParentSleepBelow):
        if ctx.parent is None or not ctx.parent.sleep_hours_7d or cond.days <= 0:
            return False
        return ctx.parent.sleep_hours_7d / cond.days < cond.hours

    if isinstance(cond, CheckInOverdue):
        if ctx.parent is None or ctx.parent.last_check_in_date is None:
            return True
        last_ms = ctx.parent.last_check_in_date.timestamp() * 1000
        return (now_ms - last_ms) / 3_600_000 >= cond.hours

    if isinstance(cond, WellnessScoreBelow):
        score = ctx.parent.last_wellness_score if ctx.parent else None
        return (score if score is not None else 100) < cond.score

    if isinstance(cond, FirstCheckIn):
        history = ctx.parent.check_in_history if ctx.parent else None
        is_first = history is not None and len(history) == 0
        return is_first == cond.value

    if isinstance(cond, ConcernRaised):
        if ctx.parent is None or not ctx.parent.check_in_history:
            return False
        return any(cond.concern in c.concerns_raised for c in ctx.parent.check_in_history)

    if isinstance(cond, AllOf):
        return all(eval_cond(c, ctx, now_ms) for c in cond.conditions)

    if isinstance(cond, AnyOf):
        return any(eval_cond(c, ctx, now_ms) for c in cond.conditions)

    if isinstance(cond, Not):
        return not eval_cond(cond.condition, ctx, now_ms)

    raise TypeError(f"Not a condition: {cond!r}")
