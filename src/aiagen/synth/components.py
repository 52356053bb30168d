"""Component Synthesizer - ComponentPlan to the ordered screen component list."""

from collections.abc import Sequence

from ..core.id import UuidAllocator
from ..core.logging_config import get_logger
from ..core.validate import GenerationRequest, UploadedFile
from ..planner.models import ComponentPlan
from .models import Component, ComponentKind

logger = get_logger(__name__)

DEFAULT_SEARCH_PROMPT = "Enter search term"

# Singleton component names
WELCOME_LABEL = "Label1"
SEARCH_BUTTON = "SearchButton"
CLEAR_BUTTON = "ClearButton"
SEARCH_BOX = "SearchBox"
RESULTS_LABEL = "ResultsLabel"
LIST_VIEW = "ListView1"
SOUND_PLAYER = "Sound1"
WEB_CLIENT = "Web1"
NOTIFIER = "Notifier1"

RESULTS_PLACEHOLDER = "Results will appear here"


def button_name(index: int) -> str:
    return f"Button{index}"


def textbox_name(index: int) -> str:
    return f"TextBox{index}"


def label_name(index: int) -> str:
    return f"Label{index}"


def image_name(index: int) -> str:
    return f"Image{index}"


class ComponentSynthesizer:
    """Expands a plan into the full, ordered component list of Screen1."""

    def __init__(self, default_search_prompt: str = DEFAULT_SEARCH_PROMPT) -> None:
        self.default_search_prompt = default_search_prompt

    def synthesize(
        self,
        plan: ComponentPlan,
        request: GenerationRequest,
        design_images: Sequence[UploadedFile] = (),
        uuids: UuidAllocator | None = None,
    ) -> list[Component]:
        """
        Build the component list.

        Args:
            plan: Parsed plan
            request: Validated request (project name, search prompt)
            design_images: Uploaded design images, in upload order
            uuids: Per-archive UUID allocator

        Returns:
            Components in screen order
        """
        uuids = uuids or UuidAllocator()

        def make(kind: ComponentKind, name: str, **props: str) -> Component:
            return Component(name=name, kind=kind, uuid=uuids.next(), properties={**props, **kind.defaults})

        components = [make(ComponentKind.LABEL, WELCOME_LABEL, Text=f"Welcome to {request.project_name}")]

        if plan.uses_default_buttons:
            components.append(make(ComponentKind.BUTTON, SEARCH_BUTTON, Text="Search"))
            components.append(make(ComponentKind.BUTTON, CLEAR_BUTTON, Text="Clear"))
        else:
            for i in range(1, plan.button_count + 1):
                components.append(make(ComponentKind.BUTTON, button_name(i), Text=f"Button {i}"))

        prompt = request.effective_search_prompt
        search_props = {"Hint": prompt or self.default_search_prompt}
        if prompt:
            search_props["Text"] = prompt
        components.append(make(ComponentKind.TEXTBOX, SEARCH_BOX, **search_props))
        components.append(make(ComponentKind.LABEL, RESULTS_LABEL, Text=RESULTS_PLACEHOLDER))

        if plan.list_view_requested:
            components.append(make(ComponentKind.LIST_VIEW, LIST_VIEW))

        for i in range(1, plan.textbox_count + 1):
            components.append(make(ComponentKind.TEXTBOX, textbox_name(i), Hint=f"Enter text {i}"))

        # Label1 is the welcome label, so extra labels start at Label2
        for i in range(2, plan.extra_label_count + 2):
            components.append(make(ComponentKind.LABEL, label_name(i), Text=f"Label {i}"))

        if plan.sound_requested:
            components.append(make(ComponentKind.SOUND, SOUND_PLAYER))

        if plan.image_components_requested:
            for i, image in enumerate(design_images, start=1):
                components.append(make(ComponentKind.IMAGE, image_name(i), Picture=image.basename))

        components.append(make(ComponentKind.WEB, WEB_CLIENT))
        components.append(make(ComponentKind.NOTIFIER, NOTIFIER))

        logger.debug("components_synthesized", count=len(components))
        return components
