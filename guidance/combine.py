"""Fuse two adjacent route steps into one."""

from .route_step import RouteStep
from .strategies import Capability, Strategy, require_capability


def combine_route_steps(
    target: RouteStep,
    source: RouteStep,
    turn_strategy: Strategy,
    signage_strategy: Strategy,
    lane_strategy: Strategy,
) -> RouteStep:
    """
    Fold source into target.

    Strategies are applied in a fixed order (turn type, signage, lanes), then
    target absorbs source's distance and duration and source is invalidated.

    Args:
        target: Step at the turn location, receives the fused maneuver.
        source: Step directly after target, consumed by the merge.
        turn_strategy: Decides the fused instruction.
        signage_strategy: Decides the fused name and signage.
        lane_strategy: Decides the fused lane guidance.

    Returns:
        The fused target step.

    Raises:
        StrategyCapabilityError: If a strategy does not support its role.
        ValueError: If either step has already been invalidated.
    """
    require_capability(turn_strategy, Capability.TURN_TYPE)
    require_capability(signage_strategy, Capability.SIGNAGE)
    require_capability(lane_strategy, Capability.LANES)

    if not (target.valid and source.valid):
        raise ValueError("Cannot combine an invalidated route step")

    turn_strategy(target, source)
    signage_strategy(target, source)
    lane_strategy(target, source)

    target.elongate_by(source)
    source.invalidate()
    return target
