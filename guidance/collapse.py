"""
Collapse turn instructions.

The route search reports every maneuver it takes. Several of them are one
turn as far as a driver is concerned: turning left at a segregated
intersection crosses two carriageways and yields two "turn left" steps, a
staggered crossing yields a left and a right a few metres apart. This pass
merges such steps so the instructions are not cluttered by maneuvers nobody
perceives.

The pass is a pure function of its input. Steps are copied before they are
modified, so the caller's sequence is left untouched and independent routes
can be collapsed concurrently.
"""

import logging
from typing import List, Sequence

from .combine import combine_route_steps
from .route_step import RouteStep
from .rules import DEFAULT_RULES, RuleTable, StepPair

logger = logging.getLogger('guidance.collapse')


def compact(steps: Sequence[RouteStep]) -> List[RouteStep]:
    """Remove invalidated steps, keeping the order of the survivors."""
    return [step for step in steps if step.valid]


def collapse_turn_instructions(
    steps: Sequence[RouteStep],
    rules: RuleTable = DEFAULT_RULES,
) -> List[RouteStep]:
    """
    Merge adjacent steps that form a single perceived maneuver.

    Scans adjacent pairs left to right. The first rule in the table that
    matches a pair decides how it is fused. The fused step is then checked
    again against the step before it and against its new successor, so runs
    of collapsible steps fold in one pass and a second pass changes nothing.

    Args:
        steps: Route steps in route order.
        rules: Priority-ordered collapse rules.

    Returns:
        New list of surviving steps in route order. Total distance and
        duration are preserved.
    """
    steps = [step.copy() for step in steps]
    if len(steps) < 2:
        return steps

    # Valid steps in route order; consumed steps leave this list immediately
    # but stay in `steps` until compaction.
    alive = compact(steps)
    combined = 0
    i = 0

    while i + 1 < len(alive):
        pair = StepPair(
            prior=alive[i - 1] if i > 0 else None,
            current=alive[i],
            following=alive[i + 1],
        )
        rule = rules.first_match(pair)
        if rule is None:
            i += 1
            continue

        turn, signage, lanes = rule.strategies(pair)
        logger.debug(
            "Collapsing '%s' into '%s' (%s, %s)",
            pair.following.instruction, pair.current.instruction, rule.name,
            pair.following.signage,
        )
        combine_route_steps(pair.current, pair.following, turn, signage, lanes)
        del alive[i + 1]
        combined += 1

        if i > 0:
            i -= 1

    result = compact(steps)
    logger.debug(
        "Collapsed %d of %d steps, %d remain", combined, len(steps), len(result)
    )
    return result
