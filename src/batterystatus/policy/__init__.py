"""Low power mode policy: model, truth table and controller."""

from batterystatus.policy.controller import PolicyController, parse_policy_flags
from batterystatus.policy.errors import PolicyError, PolicyFailure
from batterystatus.policy.models import LowPowerPolicy, flags_of, mode_of

__all__ = [
    "LowPowerPolicy",
    "PolicyController",
    "PolicyError",
    "PolicyFailure",
    "flags_of",
    "mode_of",
    "parse_policy_flags",
]
