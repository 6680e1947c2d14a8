from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..errors import StepLimitExceeded
from ..isa.decoder import decode
from ..utils.logging import get_logger
from .cache import CacheEvent, CacheHierarchy
from .executor import execute
from .state import FinalState, MachineState, MEM_SIZE

logger = get_logger("e20-sim.runtime")


@dataclass
class SimResult:
    final_state: FinalState
    steps: int
    events: List[CacheEvent] = field(default_factory=list)
    cache_stats: Dict[str, Dict[str, Any]] = field(default_factory=dict)


def run(state: MachineState,
        cache: Optional[CacheHierarchy] = None,
        max_steps: Optional[int] = None,
        memquantity: int = 128,
        on_event: Optional[Callable[[CacheEvent], None]] = None) -> SimResult:
    """
    Runs the fetch-decode-execute loop until the program halts.

    This is the main entry point for the runtime simulation. Every load and
    store is run through `cache` when one is given; the resulting events are
    collected in access order and handed to `on_event` as they happen.

    `max_steps` bounds the number of instructions; a program still running
    when it is reached raises StepLimitExceeded. By default there is no bound.
    """
    events: List[CacheEvent] = []
    steps = 0
    halted = False

    while not halted:
        if max_steps is not None and steps >= max_steps:
            logger.warning("Stopping after %d instructions without a halt (pc=%d)", steps, state.pc)
            raise StepLimitExceeded(steps, state.pc)

        pc = state.pc
        instr = decode(state.fetch())
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("pc=%5d  %04x  %s", pc % MEM_SIZE, instr.word, instr)

        result = execute(state, instr, cache)
        steps += 1
        halted = result.halted

        for event in result.events:
            events.append(event)
            if on_event is not None:
                on_event(event)

    logger.debug("Halted at pc=%d after %d instructions", state.pc, steps)

    return SimResult(
        final_state=state.snapshot(memquantity),
        steps=steps,
        events=events,
        cache_stats=cache.get_stats() if cache is not None else {},
    )
