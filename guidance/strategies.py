"""
Merge policies for fusing two adjacent route steps.

Every strategy is called as ``strategy(target, source)``. It writes only the
fields of ``target`` it is responsible for and never touches ``source``.
Calling a strategy twice with the same source leaves the target as after a
single call.

Strategies declare which roles they can fill:

- TURN_TYPE: decides the instruction of the fused step
- SIGNAGE: decides the road name and signage of the fused step
- LANES: decides the turn-lane guidance of the fused step

Wiring a strategy into a role it does not declare raises
StrategyCapabilityError.
"""

from enum import Enum
from typing import FrozenSet

from . import config
from .geometry import angular_deviation, turn_angle
from .route_step import DirectionModifier, RouteStep, TurnInstruction, TurnType


class Capability(Enum):
    TURN_TYPE = "turn type"
    SIGNAGE = "signage"
    LANES = "lanes"


class StrategyCapabilityError(TypeError):
    """A strategy was used for a role it does not support."""


def supports(strategy, capability: Capability) -> bool:
    """Check a strategy class or instance for a capability."""
    return capability in getattr(strategy, "capabilities", frozenset())


def require_capability(strategy, capability: Capability) -> None:
    """Raise StrategyCapabilityError unless the strategy supports capability."""
    if not supports(strategy, capability):
        name = strategy.__name__ if isinstance(strategy, type) else type(strategy).__name__
        raise StrategyCapabilityError(
            f"{name} is not a {capability.value} strategy"
        )


def combined_turn_angle(entry_step: RouteStep, exit_step: RouteStep) -> float:
    """
    Turn angle a driver perceives for two maneuvers taken as one.

    When both partial turns bend the same way the total angle is used, unless
    it comes out close to straight. Otherwise the partial turn that deviates
    most from straight decides.
    """
    entry_angle = entry_step.turn_angle
    exit_angle = exit_step.turn_angle
    total_angle = turn_angle(entry_step.bearing_before, exit_step.bearing_after)

    right_limit = 180 + config.SAME_SIDE_SLACK_DEG
    left_limit = 180 - config.SAME_SIDE_SLACK_DEG
    same_side = (
        (entry_angle <= right_limit and exit_angle <= right_limit)
        or (entry_angle >= left_limit and exit_angle >= left_limit)
    )

    if same_side and angular_deviation(total_angle, 180) > config.STRAIGHT_ANGLE_TOLERANCE_DEG:
        return total_angle

    if angular_deviation(entry_angle, 180) > angular_deviation(exit_angle, 180):
        return entry_angle
    return exit_angle


class Strategy:
    """Base class for merge policies."""

    capabilities: FrozenSet[Capability] = frozenset()

    def __call__(self, target: RouteStep, source: RouteStep) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NoModificationStrategy(Strategy):
    """Leave the target as it is."""

    capabilities = frozenset(Capability)

    def __call__(self, target: RouteStep, source: RouteStep) -> None:
        pass


class TransferTurnTypeStrategy(Strategy):
    """The second maneuver's classification describes the fused turn."""

    capabilities = frozenset({Capability.TURN_TYPE})

    def __call__(self, target: RouteStep, source: RouteStep) -> None:
        target.instruction = source.instruction


class AdjustToCombinedTurnAngleStrategy(Strategy):
    """
    Reclassify the target by the turn the driver perceives.

    Used where two partial turns add up to one real turn, e.g. the two
    carriageways of a segregated intersection. A name change that ends up
    bending becomes a turn.
    """

    capabilities = frozenset({Capability.TURN_TYPE})

    def __call__(self, target: RouteStep, source: RouteStep) -> None:
        modifier = DirectionModifier.from_angle(combined_turn_angle(target, source))
        turn_type = target.instruction.type
        if modifier != DirectionModifier.STRAIGHT and target.instruction.is_non_turn:
            turn_type = TurnType.TURN
        target.instruction = TurnInstruction(turn_type, modifier)


class SetFixedInstructionStrategy(Strategy):
    """Assign a predetermined instruction regardless of geometry."""

    capabilities = frozenset({Capability.TURN_TYPE})

    def __init__(self, instruction: TurnInstruction):
        self.instruction = instruction

    def __call__(self, target: RouteStep, source: RouteStep) -> None:
        target.instruction = self.instruction

    def __repr__(self) -> str:
        return f"SetFixedInstructionStrategy({self.instruction})"


class StaggeredTurnStrategy(Strategy):
    """
    Announce a staggered intersection as one oblique crossing.

    The two short opposite turns are a crossing offset by a few metres. The
    direction is the angle between the road entering the intersection and the
    road leaving it, so a crossing that bends is announced as bending. If the
    road beyond carries the same name as the road before the intersection the
    maneuver needs no announcement at all.
    """

    capabilities = frozenset({Capability.TURN_TYPE})

    def __init__(self, step_prior_to_intersection: RouteStep):
        self.step_prior_to_intersection = step_prior_to_intersection

    def __call__(self, target: RouteStep, source: RouteStep) -> None:
        if self.step_prior_to_intersection.name == source.name:
            turn_type = TurnType.SUPPRESSED
        else:
            turn_type = TurnType.NEW_NAME
        crossing_angle = turn_angle(target.bearing_before, source.bearing_after)
        target.instruction = TurnInstruction(turn_type, DirectionModifier.from_angle(crossing_angle))


class TransferSignageStrategy(Strategy):
    """Take road name and signage from the second maneuver."""

    capabilities = frozenset({Capability.SIGNAGE})

    def __call__(self, target: RouteStep, source: RouteStep) -> None:
        target.name = source.name
        target.signage = source.signage


class TransferLanesStrategy(Strategy):
    """Take turn-lane guidance from the second maneuver."""

    capabilities = frozenset({Capability.LANES})

    def __call__(self, target: RouteStep, source: RouteStep) -> None:
        target.lanes = source.lanes
