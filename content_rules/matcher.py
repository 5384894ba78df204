"""Pick the single highest-priority rule for a screen slot and resolve it."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .cache import Cache, now_ms
from .conditions import eval_cond
from .models import RuleContext, Screen, Slot, SlotContent
from .props import resolve_ai_props, resolve_quick_props
from .rules import Rule

log = logging.getLogger(__name__)


def match_rule(
    rules: Iterable[Rule],
    screen: Screen,
    slot: Slot,
    ctx: RuleContext,
) -> Rule | None:
    """Return the winning rule, or None. Equal priorities keep the earliest rule."""
    at = now_ms()
    best: Rule | None = None
    for rule in rules:
        if rule.screen != screen or rule.slot != slot:
            continue
        if not eval_cond(rule.condition, ctx, at):
            continue
        if best is None or rule.priority > best.priority:
            best = rule
    return best


async def pick_for_slot(
    rules: Iterable[Rule],
    screen: Screen,
    slot: Slot,
    ctx: RuleContext,
    cache: Cache,
    *,
    defer_ai: bool = False,
) -> SlotContent | None:
    rule = match_rule(rules, screen, slot, ctx)
    if rule is None:
        log.debug("No content for %s/%s", screen, slot)
        return None

    if defer_ai:
        props = resolve_quick_props(rule.content.props, ctx)
    else:
        props = await resolve_ai_props(rule.content.props, ctx, cache)
    return SlotContent(template=rule.content.template, props=props)


async def pick_slots(
    rules: Sequence[Rule],
    targets: Iterable[tuple[Screen, Slot]],
    ctx: RuleContext,
    cache: Cache,
    *,
    limit: int | None = None,
    defer_ai: bool = False,
) -> list[SlotContent]:
    """Fill several slots in order, skipping empty ones, up to ``limit`` results."""
    results: list[SlotContent] = []
    for screen, slot in targets:
        if limit is not None and len(results) >= limit:
            break
        content = await pick_for_slot(rules, screen, slot, ctx, cache, defer_ai=defer_ai)
        if content is not None:
            results.append(content)
    return results
