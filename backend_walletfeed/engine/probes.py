"""
Ordered best-effort probing: run probes in priority order, return the first usable answer.

A probe is a named zero-argument coroutine function. Exceptions and timeouts
raised by a probe are logged and treated as "no answer"; they never abort the
sequence. Shared by the metadata and mint-origin resolvers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Sequence, TypeVar

from backend_walletfeed.walletfeed_logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Probe(Generic[T]):
    name: str
    run: Callable[[], Awaitable[T | None]]


async def first_success(
    probes: Sequence[Probe[T]],
    accept: Callable[[T], bool],
    *,
    context: dict[str, Any] | None = None,
) -> tuple[T | None, str | None]:
    """
    Await each probe in order; return (answer, probe_name) for the first answer
    that is not None and passes `accept`, or (None, None) when none does.
    """
    ctx = context or {}
    for probe in probes:
        try:
            answer = await probe.run()
        except Exception as e:
            logger.debug("probe_failed", probe=probe.name, error=str(e) or type(e).__name__, **ctx)
            continue
        if answer is None or not accept(answer):
            logger.debug("probe_no_answer", probe=probe.name, **ctx)
            continue
        logger.debug("probe_answered", probe=probe.name, **ctx)
        return answer, probe.name
    return None, None
