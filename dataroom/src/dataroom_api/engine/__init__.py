"""Pure decision logic: clocks, lifecycle and permission evaluation."""

from .clock import Clock, FixedClock, SystemClock
from .lifecycle import LifecycleEvaluator, LifecycleState, evaluate_lifecycle
from .permissions import AccessDecision, DenialReason, PermissionEvaluator

__all__ = [
    "AccessDecision",
    "Clock",
    "DenialReason",
    "FixedClock",
    "LifecycleEvaluator",
    "LifecycleState",
    "PermissionEvaluator",
    "SystemClock",
    "evaluate_lifecycle",
]
