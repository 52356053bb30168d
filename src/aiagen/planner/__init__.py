"""
Requirement Planner
Turns free-text requirements into a typed ComponentPlan
"""

from .models import ButtonEffect, ComponentPlan, EffectKind
from .parser import RequirementParser, TokenMatch, parse_requirements, scan_button_tokens

__all__ = [
    "ButtonEffect",
    "ComponentPlan",
    "EffectKind",
    "RequirementParser",
    "TokenMatch",
    "parse_requirements",
    "scan_button_tokens",
]
