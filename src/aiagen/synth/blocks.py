"""Block Synthesizer - button actions to the Screen1 block program.

Every block in one document, nested ones included, takes its id from a
single BlockIdCounter, so ids are unique and strictly increasing in
creation order.
"""

from xml.etree import ElementTree as ET

from ..core.logging_config import get_logger
from ..planner.models import ComponentPlan, EffectKind
from .colors import resolve_color
from .components import (
    CLEAR_BUTTON,
    RESULTS_LABEL,
    SEARCH_BOX,
    SEARCH_BUTTON,
    WELCOME_LABEL,
    button_name,
)
from .models import (
    FORM_TYPE,
    SCREEN_NAME,
    BlockDocument,
    BlockInput,
    BlockKind,
    EventBlock,
)

logger = get_logger(__name__)

BLOCKLY_XMLNS = "https://developers.google.com/blockly/xml"

EVENT_X = 50
EVENT_Y_BASE = 50
EVENT_Y_STEP = 150

SEARCH_RESULT_PREFIX = "Searching for: "


class BlockIdCounter:
    """Monotonic id source for one block document."""

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError("block ids must be positive")
        self._next = start

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    @property
    def issued(self) -> int:
        """Number of ids handed out so far."""
        return self._next - 1


def event_position(index: int) -> tuple[int, int]:
    """Canvas position of the index-th (1-based) top-level event block."""
    return (EVENT_X, EVENT_Y_BASE + EVENT_Y_STEP * (index - 1))


class BlockBuilder:
    """Creates individual blocks, drawing ids from a shared counter.

    Value and body blocks are built before the block that holds them, so a
    child always carries a smaller id than its parent.
    """

    def __init__(self, ids: BlockIdCounter) -> None:
        self.ids = ids

    def event(
        self,
        component_type: str,
        instance: str,
        event_name: str,
        body: list[EventBlock],
        position: tuple[int, int],
    ) -> EventBlock:
        return EventBlock(
            id=self.ids.next(),
            type="component_event",
            kind=BlockKind.EVENT,
            mutation={
                "component_type": component_type,
                "is_generic": "false",
                "instance_name": instance,
                "event_name": event_name,
            },
            fields={"COMPONENT_SELECTOR": instance},
            inputs=[BlockInput(name="DO", kind="statement", blocks=body)],
            position=position,
        )

    def setter(self, component_type: str, instance: str, prop: str, value: EventBlock) -> EventBlock:
        return EventBlock(
            id=self.ids.next(),
            type="component_set_get",
            kind=BlockKind.SETTER,
            mutation={
                "component_type": component_type,
                "set_or_get": "set",
                "property_name": prop,
                "is_generic": "false",
                "instance_name": instance,
            },
            fields={"COMPONENT_SELECTOR": instance, "PROP": prop},
            inputs=[BlockInput(name="VALUE", kind="value", blocks=[value])],
        )

    def getter(self, component_type: str, instance: str, prop: str) -> EventBlock:
        return EventBlock(
            id=self.ids.next(),
            type="component_set_get",
            kind=BlockKind.VALUE,
            mutation={
                "component_type": component_type,
                "set_or_get": "get",
                "property_name": prop,
                "is_generic": "false",
                "instance_name": instance,
            },
            fields={"COMPONENT_SELECTOR": instance, "PROP": prop},
        )

    def method(self, component_type: str, instance: str, method_name: str) -> EventBlock:
        return EventBlock(
            id=self.ids.next(),
            type="component_method",
            kind=BlockKind.METHOD,
            mutation={
                "component_type": component_type,
                "method_name": method_name,
                "is_generic": "false",
                "instance_name": instance,
            },
            fields={"COMPONENT_SELECTOR": instance},
        )

    def text(self, value: str) -> EventBlock:
        return EventBlock(id=self.ids.next(), type="text", kind=BlockKind.VALUE, fields={"TEXT": value})

    def number(self, value: int) -> EventBlock:
        return EventBlock(id=self.ids.next(), type="math_number", kind=BlockKind.VALUE, fields={"NUM": str(value)})

    def _items(self, block_type: str, items: list[EventBlock]) -> EventBlock:
        return EventBlock(
            id=self.ids.next(),
            type=block_type,
            kind=BlockKind.VALUE,
            mutation={"items": str(len(items))},
            inputs=[BlockInput(name=f"ADD{i}", kind="value", blocks=[item]) for i, item in enumerate(items)],
        )

    def join(self, parts: list[EventBlock]) -> EventBlock:
        return self._items("text_join", parts)

    def make_color(self, channels: tuple[int, int, int]) -> EventBlock:
        color_list = self._items("lists_create_with", [self.number(c) for c in channels])
        return EventBlock(
            id=self.ids.next(),
            type="color_make_color",
            kind=BlockKind.VALUE,
            inputs=[BlockInput(name="COLORLIST", kind="value", blocks=[color_list])],
        )


class BlockSynthesizer:
    """Builds the block document for Screen1."""

    def synthesize(
        self,
        plan: ComponentPlan,
        button_count: int,
        search_prompt: str = "",
        project_name: str = "",
    ) -> BlockDocument:
        """
        Generate click handlers for every button.

        Args:
            plan: Parsed plan (button actions)
            button_count: Number of numbered buttons; 0 selects the default pair
            search_prompt: Used in the default label text
            project_name: Fallback for the label text when no prompt is set

        Returns:
            BlockDocument with one top-level event block per button
        """
        builder = BlockBuilder(BlockIdCounter())
        if button_count > 0:
            blocks = [
                self._button_handler(builder, plan, i, search_prompt or project_name)
                for i in range(1, button_count + 1)
            ]
        else:
            blocks = self._default_handlers(builder)

        logger.debug("blocks_synthesized", events=len(blocks), ids=builder.ids.issued)
        return BlockDocument(blocks=blocks)

    def _button_handler(self, builder: BlockBuilder, plan: ComponentPlan, index: int, subject: str) -> EventBlock:
        colors = plan.effects_for(index, EffectKind.SET_BACKGROUND_COLOR)
        if colors:
            body = [
                builder.setter(
                    FORM_TYPE,
                    SCREEN_NAME,
                    "BackgroundColor",
                    builder.make_color(resolve_color(effect.argument).channels),
                )
                for effect in colors
            ]
        else:
            body = [builder.setter("Label", WELCOME_LABEL, "Text", builder.text(f"Button {index} clicked: {subject}"))]
        return builder.event("Button", button_name(index), "Click", body, event_position(index))

    def _default_handlers(self, builder: BlockBuilder) -> list[EventBlock]:
        query = builder.join([builder.text(SEARCH_RESULT_PREFIX), builder.getter("TextBox", SEARCH_BOX, "Text")])
        search = builder.event(
            "Button",
            SEARCH_BUTTON,
            "Click",
            [builder.setter("Label", RESULTS_LABEL, "Text", query)],
            event_position(1),
        )

        clear_body = [
            builder.setter("TextBox", SEARCH_BOX, "Text", builder.text("")),
            builder.method("TextBox", SEARCH_BOX, "HideKeyboard"),
        ]
        clear = builder.event("Button", CLEAR_BUTTON, "Click", clear_body, event_position(2))
        return [search, clear]


# ============================================================================
# XML Rendering
# ============================================================================


def _block_element(block: EventBlock) -> ET.Element:
    attrib = {"type": block.type, "id": str(block.id)}
    if block.position is not None:
        attrib["x"], attrib["y"] = (str(v) for v in block.position)
    element = ET.Element("block", attrib)
    if block.mutation:
        ET.SubElement(element, "mutation", block.mutation)
    for name, value in block.fields.items():
        ET.SubElement(element, "field", {"name": name}).text = value
    for block_input in block.inputs:
        if not block_input.blocks:
            continue
        tag = "statement" if block_input.kind == "statement" else "value"
        ET.SubElement(element, tag, {"name": block_input.name}).append(_chain(block_input.blocks))
    return element


def _chain(blocks: list[EventBlock]) -> ET.Element:
    """Render a statement sequence as nested <next> links."""
    head = _block_element(blocks[0])
    tail = head
    for block in blocks[1:]:
        nxt = ET.SubElement(tail, "next")
        element = _block_element(block)
        nxt.append(element)
        tail = element
    return head


def render_bky(document: BlockDocument) -> str:
    """Serialize a block document to the Screen1.bky XML text."""
    root = ET.Element("xml", {"xmlns": BLOCKLY_XMLNS})
    container = ET.SubElement(
        root,
        "yacodeblocks",
        {"ya-version": document.ya_version, "language-version": document.language_version},
    )
    for block in document.blocks:
        container.append(_block_element(block))
    ET.indent(root, space="  ")
    return ET.tostring(root, encoding="unicode", short_empty_elements=False)
