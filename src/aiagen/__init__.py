"""
AIA Generator
Synthesizes block-programming project archives from free-text requirements
"""

from .generator import AiaGenerator, GenerationError

__version__ = "0.1.0"

__all__ = ["AiaGenerator", "GenerationError", "__version__"]
