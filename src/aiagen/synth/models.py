"""Screen and Block Data Models."""

from collections.abc import Iterator
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

# Automatic size sentinel written as the default Width (and Height) of sized components
AUTOMATIC_SIZE = "-2"

SCREEN_NAME = "Screen1"
FORM_TYPE = "Form"
FORM_VERSION = "31"
YA_VERSION = "232"
BLOCKS_LANGUAGE_VERSION = "36"


class ComponentKind(Enum):
    """Supported widget kinds: (type name, schema version, default attributes)."""

    BUTTON = ("Button", "7", (("Width", AUTOMATIC_SIZE),))
    LABEL = ("Label", "6", (("Width", AUTOMATIC_SIZE),))
    TEXTBOX = ("TextBox", "6", (("Width", AUTOMATIC_SIZE),))
    LIST_VIEW = ("ListView", "6", (("Width", AUTOMATIC_SIZE), ("Height", AUTOMATIC_SIZE)))
    IMAGE = ("Image", "5", (("Width", AUTOMATIC_SIZE), ("Height", AUTOMATIC_SIZE)))
    SOUND = ("Sound", "4", ())
    WEB = ("Web", "6", ())
    NOTIFIER = ("Notifier", "6", ())

    def __init__(self, type_name: str, version: str, defaults: tuple[tuple[str, str], ...]) -> None:
        self.type_name = type_name
        self.version = version
        self.defaults = dict(defaults)


class Component(BaseModel):
    """One component instance placed on the screen."""

    name: str = Field(..., description="Unique within the screen")
    kind: ComponentKind
    uuid: str
    properties: dict[str, str] = Field(default_factory=dict)

    @property
    def type(self) -> str:
        return self.kind.type_name

    @property
    def version(self) -> str:
        return self.kind.version

    def to_scm(self) -> dict[str, Any]:
        """Component object as it appears in the screen definition."""
        return {
            "$Name": self.name,
            "$Type": self.kind.type_name,
            "$Version": self.kind.version,
            "Uuid": self.uuid,
            **self.properties,
        }


class BlockKind(str, Enum):
    """Role of a block in the program."""

    EVENT = "event"
    SETTER = "setter"
    METHOD = "method"
    VALUE = "value"


class BlockInput(BaseModel):
    """A named socket on a block: a value input or a statement body."""

    name: str
    kind: Literal["value", "statement"]
    blocks: list["EventBlock"] = Field(default_factory=list)


class EventBlock(BaseModel):
    """A node in the block program."""

    id: int = Field(..., gt=0)
    type: str
    kind: BlockKind
    mutation: dict[str, str] = Field(default_factory=dict)
    fields: dict[str, str] = Field(default_factory=dict)
    inputs: list[BlockInput] = Field(default_factory=list)
    position: tuple[int, int] | None = None

    @property
    def children(self) -> list["EventBlock"]:
        return [block for block_input in self.inputs for block in block_input.blocks]

    def walk(self) -> Iterator["EventBlock"]:
        """Depth-first traversal including this block."""
        yield self
        for child in self.children:
            yield from child.walk()

    @property
    def component_reference(self) -> str | None:
        return self.mutation.get("instance_name")


class BlockDocument(BaseModel):
    """Ordered top-level blocks of one screen."""

    blocks: list[EventBlock] = Field(default_factory=list)
    ya_version: str = YA_VERSION
    language_version: str = BLOCKS_LANGUAGE_VERSION

    def walk(self) -> Iterator[EventBlock]:
        for block in self.blocks:
            yield from block.walk()

    def ids(self) -> list[int]:
        return [block.id for block in self.walk()]

    def component_references(self) -> set[str]:
        """Every component name referenced by any block."""
        return {ref for ref in (block.component_reference for block in self.walk()) if ref}

    def event_handlers(self, event_name: str = "Click") -> list[EventBlock]:
        """Top-level event blocks for the given event."""
        return [
            block
            for block in self.blocks
            if block.kind == BlockKind.EVENT and block.mutation.get("event_name") == event_name
        ]


BlockInput.model_rebuild()
