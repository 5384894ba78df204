"""All content programs, flattened into one rule list."""

from __future__ import annotations

from typing import Any

from ..rules import Rule
from .celebrations import create_celebrations_program
from .example import create_example_program
from .learning_ai import create_learning_ai_program
from .milestones import create_milestones_program
from .milestones_ai import create_milestones_ai_program

PROGRAM_FACTORIES = (
    create_celebrations_program,
    create_milestones_program,
    create_example_program,
    create_learning_ai_program,
    create_milestones_ai_program,
)


def build_rules(ai: Any) -> list[Rule]:
    rules: list[Rule] = []
    for factory in PROGRAM_FACTORIES:
        rules.extend(factory(ai).build())
    return rules
