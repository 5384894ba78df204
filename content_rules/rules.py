"""Immutable rules and the fluent Program builder that produces them."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from .conditions import Condition, and_
from .models import Screen, Slot


@dataclass(frozen=True)
class Content:
    template: str
    props: Mapping[str, Any]


@dataclass(frozen=True)
class Rule:
    screen: Screen
    slot: Slot
    condition: Condition
    content: Content
    priority: float = 0


class RuleBuilder:
    def __init__(self) -> None:
        self._screen: Screen | None = None
        self._slot: Slot | None = None
        self._conditions: list[Condition] = []
        self._content: Content | None = None
        self._priority: float = 0

    def slot(self, screen: Screen, slot: Slot) -> RuleBuilder:
        self._screen = screen
        self._slot = slot
        return self

    def when(self, *conditions: Condition) -> RuleBuilder:
        self._conditions.extend(conditions)
        return self

    def show(self, template: str, props: Mapping[str, Any] | None = None) -> RuleBuilder:
        self._content = Content(template=template, props=MappingProxyType(dict(props or {})))
        return self

    def priority(self, value: float) -> RuleBuilder:
        self._priority = value
        return self

    def build(self) -> Rule:
        missing = [
            name
            for name, present in (
                ("slot", self._screen is not None and self._slot is not None),
                ("when", bool(self._conditions)),
                ("show", self._content is not None),
            )
            if not present
        ]
        if missing:
            raise ValueError(f"Rule is missing required parts: {', '.join(missing)}")

        conditions = tuple(self._conditions)
        condition = conditions[0] if len(conditions) == 1 else and_(*conditions)
        return Rule(
            screen=Screen(self._screen),
            slot=Slot(self._slot),
            condition=condition,
            content=self._content,
            priority=self._priority,
        )


class _Series:
    """Bulk rule generation over inclusive postpartum day/week ranges."""

    def __init__(self, program: Program) -> None:
        self._program = program

    def pp_days(self, start: int, end: int, factory: Callable[..., Rule | None]) -> None:
        for day in range(start, end + 1):
            rule = factory(day=day)
            if rule is not None:
                self._program.add(rule)

    def pp_weeks(self, start: int, end: int, factory: Callable[..., Rule | None]) -> None:
        for week in range(start, end + 1):
            rule = factory(week=week)
            if rule is not None:
                self._program.add(rule)


class Program:
    def __init__(self) -> None:
        self._rules: list[Rule] = []
        self.series = _Series(self)

    def rule(self) -> RuleBuilder:
        return RuleBuilder()

    def add(self, rule: Rule) -> None:
        if not isinstance(rule, Rule):
            raise TypeError(f"Program.add() expects a Rule, got {type(rule).__name__}")
        self._rules.append(rule)

    def build(self) -> list[Rule]:
        return list(self._rules)

    def __len__(self) -> int:
        return len(self._rules)
