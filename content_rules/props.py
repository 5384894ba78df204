"""Rule props: literal, computed and AI-generated values, and their resolution.

AI props go through a cache-aside protocol guarded by a "pending" marker so
that concurrent requests for the same key do not all start a generation:

1. A fresh pending marker (at most five minutes old) short-circuits to
   ``[AI_PENDING]``. An older one is treated as abandoned.
2. Otherwise a pending marker is written, the generator runs, and its picked
   output is cached with the prop's TTL.
3. A failing generator leaves a one-second error marker behind and the prop
   resolves to ``[AI_ERROR]``.

The marker is best-effort: there is no atomic check-and-set between reading
the cache and writing the marker, so two racing requests may both generate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar

from .cache import Cache, now_ms, parse_ttl
from .models import RuleContext

log = logging.getLogger(__name__)

T = TypeVar("T")

AI_PENDING = "[AI_PENDING]"
AI_ERROR = "[AI_ERROR]"

PENDING_TTL_MS = 5 * 60 * 1000
ERROR_TTL_MS = 1000
PROMPT_LIST_DELIMITER = "||"


class PropKind(str, Enum):
    LITERAL = "literal"
    COMPUTE = "compute"
    AI_TEXT = "ai_text"


@dataclass(frozen=True)
class ComputeProp(Generic[T]):
    fn: Callable[[RuleContext], T]
    kind: PropKind = field(default=PropKind.COMPUTE, init=False)


@dataclass(frozen=True)
class AICall(Generic[T]):
    """An async generator call plus the projection applied to its output."""

    fn: Callable[[], Awaitable[T]]
    pick: Callable[[T], Any]


@dataclass(frozen=True)
class AITextProp:
    key: Callable[[RuleContext], str]
    ttl: str
    call: Callable[[RuleContext], AICall]
    kind: PropKind = field(default=PropKind.AI_TEXT, init=False)
    ttl_ms: int = field(init=False)

    def __post_init__(self) -> None:
        # Bad TTLs are configuration errors; surface them when the rule is built.
        object.__setattr__(self, "ttl_ms", parse_ttl(self.ttl))


def compute(fn: Callable[[RuleContext], T]) -> ComputeProp[T]:
    return ComputeProp(fn)


def ai_call(fn: Callable[[], Awaitable[T]], pick: Callable[[T], Any]) -> AICall[T]:
    return AICall(fn=fn, pick=pick)


def ai_text(
    *,
    key: Callable[[RuleContext], str],
    ttl: str,
    call: Callable[[RuleContext], AICall],
) -> AITextProp:
    return AITextProp(key=key, ttl=ttl, call=call)


def _split_prompts(result: Any) -> Any:
    if isinstance(result, str):
        return [part.strip() for part in result.split(PROMPT_LIST_DELIMITER)]
    return result


def ai_prompt_list(
    *,
    key: Callable[[RuleContext], str],
    ttl: str,
    call: Callable[[RuleContext], AICall],
) -> AITextProp:
    """Like :func:`ai_text`, but a string result is split on ``||`` into a list."""

    def split_call(ctx: RuleContext) -> AICall:
        inner = call(ctx)
        return AICall(fn=inner.fn, pick=lambda output: _split_prompts(inner.pick(output)))

    return AITextProp(key=key, ttl=ttl, call=split_call)


def prop_kind(value: Any) -> PropKind:
    if isinstance(value, ComputeProp):
        return PropKind.COMPUTE
    if isinstance(value, AITextProp):
        return PropKind.AI_TEXT
    return PropKind.LITERAL


def _marker_status(value: Any) -> str | None:
    if isinstance(value, dict):
        return value.get("_status")
    return None


async def _resolve_ai_text(prop: AITextProp, ctx: RuleContext, cache: Cache) -> Any:
    try:
        cache_key = prop.key(ctx)
    except Exception:
        log.exception("AI prop key function failed")
        return AI_ERROR

    cached = await cache.get(cache_key)
    if cached is not None and not cached.is_expired():
        status = _marker_status(cached.val)
        if status == "pending":
            pending_age = now_ms() - (cached.val.get("_timestamp") or 0)
            if pending_age <= PENDING_TTL_MS:
                log.debug("Generation in flight for %s; returning placeholder.", cache_key)
                return AI_PENDING
            log.warning("Stale pending entry for key %s; regenerating.", cache_key)
        elif status == "error":
            log.debug("Previous generation for %s failed; retrying.", cache_key)
        else:
            log.debug("Cache hit for %s", cache_key)
            return cached.val

    await cache.set(cache_key, {"_status": "pending", "_timestamp": now_ms()}, PENDING_TTL_MS)

    try:
        call_config = prop.call(ctx)
        output = await call_config.fn()
        result = call_config.pick(output)
    except Exception:
        log.exception("AI generation failed for key %s", cache_key)
        await cache.set(cache_key, {"_status": "error"}, ERROR_TTL_MS)
        return AI_ERROR

    await cache.set(cache_key, result, prop.ttl_ms)
    return result


async def resolve_ai_props(
    props: Mapping[str, Any],
    ctx: RuleContext,
    cache: Cache,
) -> dict[str, Any]:
    """Resolve every prop in insertion order, one at a time."""
    resolved: dict[str, Any] = {}
    for name, value in props.items():
        kind = prop_kind(value)
        if kind is PropKind.LITERAL:
            resolved[name] = value
        elif kind is PropKind.COMPUTE:
            resolved[name] = value.fn(ctx)
        elif kind is PropKind.AI_TEXT:
            resolved[name] = await _resolve_ai_text(value, ctx, cache)
        else:
            raise ValueError(f"Unhandled prop kind: {kind}")
    return resolved


def resolve_quick_props(props: Mapping[str, Any], ctx: RuleContext) -> dict[str, Any]:
    """Resolve literal and computed props now; AI props become placeholders.

    Used when a caller wants to render immediately and fill AI text in a
    later pass without waiting on the cache or the generator.
    """
    resolved: dict[str, Any] = {}
    for name, value in props.items():
        kind = prop_kind(value)
        if kind is PropKind.COMPUTE:
            resolved[name] = value.fn(ctx)
        elif kind is PropKind.AI_TEXT:
            resolved[name] = AI_PENDING
        else:
            resolved[name] = value
    return resolved
