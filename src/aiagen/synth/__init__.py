"""
Screen Synthesis
Component list and block program generation from a ComponentPlan
"""

from .blocks import BlockIdCounter, BlockSynthesizer, render_bky
from .colors import DEFAULT_COLOR, NAMED_COLORS, Color, resolve_color
from .components import ComponentSynthesizer
from .models import BlockDocument, BlockKind, Component, ComponentKind, EventBlock

__all__ = [
    "BlockDocument",
    "BlockIdCounter",
    "BlockKind",
    "BlockSynthesizer",
    "Color",
    "Component",
    "ComponentKind",
    "ComponentSynthesizer",
    "DEFAULT_COLOR",
    "EventBlock",
    "NAMED_COLORS",
    "render_bky",
    "resolve_color",
]
