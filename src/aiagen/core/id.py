"""ID Generation System.

Two kinds of identifiers are needed while building one project archive:

- Workspace IDs: ULID-based, lexicographically sortable and unique across
  concurrent requests, so scratch directories never collide.
- Component UUIDs: the project format stores a decimal string per component.
  These only have to be unique within one archive, so a per-request
  allocator hands them out and remembers what it already issued.
"""

import random
from typing import NewType

from ulid import ULID

# ============================================================================
# Type-Safe ID Wrappers
# ============================================================================

WorkspaceID = NewType("WorkspaceID", str)
"""Scratch workspace identifier"""

GenerationID = NewType("GenerationID", str)
"""Archive generation task identifier"""

# ============================================================================
# ID Prefixes
# ============================================================================


class Prefix:
    """ID prefix constants."""

    WORKSPACE = "ws"
    GENERATION = "gen"


# ============================================================================
# ULID Generator
# ============================================================================


class Generator:
    """ULID generator."""

    def generate(self) -> str:
        """Generate a new ULID."""
        return str(ULID())

    def generate_with_prefix(self, prefix: str) -> str:
        """Generate ULID with type prefix."""
        return f"{prefix}_{self.generate()}"


# Singleton instance
_generator = Generator()


def new_workspace_id() -> WorkspaceID:
    """Generate new workspace ID."""
    return WorkspaceID(_generator.generate_with_prefix(Prefix.WORKSPACE))


def new_generation_id() -> GenerationID:
    """Generate new generation ID."""
    return GenerationID(_generator.generate_with_prefix(Prefix.GENERATION))


# ============================================================================
# Component UUIDs
# ============================================================================


class UuidAllocator:
    """Issues component UUIDs that are unique within one archive.

    The format only requires a decimal string; values are drawn from
    ``[1, upper)`` and redrawn on collision. ``"0"`` is reserved for the
    screen itself.
    """

    def __init__(self, rng: random.Random | None = None, upper: int = 1_000_000_000) -> None:
        if upper < 2:
            raise ValueError("upper must be at least 2")
        self._rng = rng or random.Random()
        self._upper = upper
        self._issued: set[str] = {"0"}

    def next(self) -> str:
        """Return a fresh UUID string."""
        if len(self._issued) >= self._upper:
            raise RuntimeError("UUID space exhausted")
        while True:
            value = str(self._rng.randrange(1, self._upper))
            if value not in self._issued:
                self._issued.add(value)
                return value

    @property
    def issued(self) -> frozenset[str]:
        return frozenset(self._issued - {"0"})
