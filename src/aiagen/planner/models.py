"""Plan Data Models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MAX_BUTTONS = 10
MAX_TEXTBOXES = 5
MAX_NAMED_LABELS = 6
MAX_EXTRA_LABELS = MAX_NAMED_LABELS - 1  # Label1 is the welcome label


class EffectKind(str, Enum):
    """What a button click does."""

    SET_BACKGROUND_COLOR = "set_background_color"


class ButtonEffect(BaseModel):
    """One recorded effect for a button click."""

    model_config = ConfigDict(frozen=True)

    kind: EffectKind
    argument: str = Field(..., description="Effect argument, e.g. a lowercase color name")


class ComponentPlan(BaseModel):
    """Typed intermediate form of the free-text requirements."""

    model_config = ConfigDict(frozen=True)

    button_count: int = Field(default=0, ge=0, le=MAX_BUTTONS, description="0 means default buttons")
    list_view_requested: bool = False
    textbox_count: int = Field(default=0, ge=0, le=MAX_TEXTBOXES)
    extra_label_count: int = Field(default=0, ge=0, le=MAX_EXTRA_LABELS)
    sound_requested: bool = False
    image_components_requested: bool = False
    button_actions: dict[int, list[ButtonEffect]] = Field(default_factory=dict)

    @property
    def uses_default_buttons(self) -> bool:
        return self.button_count == 0

    def effects_for(self, index: int, kind: EffectKind | None = None) -> list[ButtonEffect]:
        """Effects recorded for a 1-based button index, optionally filtered by kind."""
        effects = self.button_actions.get(index, [])
        if kind is None:
            return list(effects)
        return [e for e in effects if e.kind == kind]

    def detected_features(self) -> dict[str, Any]:
        """Summary of what was recognized, for the validation endpoint."""
        return {
            "button_count": self.button_count,
            "use_list_view": self.list_view_requested,
            "textbox_count": self.textbox_count,
            "label_count": self.extra_label_count,
            "play_sound": self.sound_requested,
            "use_images": self.image_components_requested,
            "button_actions": {
                str(index): [effect.model_dump(mode="json") for effect in effects]
                for index, effects in sorted(self.button_actions.items())
            },
        }
