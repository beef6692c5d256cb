"""
Route guidance post-processing.

This package collapses the raw maneuver-by-maneuver output of a route search
into the turns a driver actually perceives.
"""

from guidance.collapse import collapse_turn_instructions, compact
from guidance.combine import combine_route_steps
from guidance.route_step import (
    DirectionModifier,
    Lane,
    RouteStep,
    Signage,
    TurnInstruction,
    TurnType,
    steps_from_osrm,
)
from guidance.rules import DEFAULT_RULES, CollapseRule, RuleTable, StepPair, StrategyFactory
from guidance.strategies import Capability, StrategyCapabilityError

__all__ = [
    'collapse_turn_instructions',
    'compact',
    'combine_route_steps',
    'DirectionModifier',
    'Lane',
    'RouteStep',
    'Signage',
    'TurnInstruction',
    'TurnType',
    'steps_from_osrm',
    'DEFAULT_RULES',
    'CollapseRule',
    'RuleTable',
    'StepPair',
    'StrategyFactory',
    'Capability',
    'StrategyCapabilityError',
]
