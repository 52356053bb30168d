"""Requirement Parser - free text to ComponentPlan.

A best-effort keyword classifier. It never raises: text that matches
nothing yields the empty plan, which the synthesizers turn into the
default screen.
"""

import re
from dataclasses import dataclass

from ..core.logging_config import get_logger
from .models import (
    MAX_BUTTONS,
    MAX_EXTRA_LABELS,
    MAX_TEXTBOXES,
    ButtonEffect,
    ComponentPlan,
    EffectKind,
)

logger = get_logger(__name__)

WORD_NUMBERS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

_BUTTON_TOKEN = re.compile(r"\bbutton(\d{1,6})\b", re.IGNORECASE)
_BUTTON_PHRASE = re.compile(r"\b(\d{1,6})\s*buttons?\b", re.IGNORECASE)
_BUTTON_WORD_PHRASE = re.compile(
    r"\b(" + "|".join(WORD_NUMBERS) + r")\s+buttons?\b", re.IGNORECASE
)
# Spans between the button and its color may not cross another button reference
_NO_BUTTON = r"(?:(?!\bbutton\s*\d).)*?"
_CLICK_COLOR_ACTION = re.compile(
    r"\b(?:on|when)\s+button\s*(\d{1,6})\b"
    + _NO_BUTTON
    + r"\bclick(?:ed|s)?\b"
    + _NO_BUTTON
    + r"\bset\b"
    + _NO_BUTTON
    + r"\bbackground\s*colou?r\s+to\s+([a-z]+)",
    re.IGNORECASE,
)
_SCREEN_COLOR_ACTION = re.compile(
    r"\bset\s+screen(\d+)?\s*\.\s*background\s*colou?r\s+to\s+([a-z]+)",
    re.IGNORECASE,
)
_TEXTBOX_PHRASE = re.compile(r"\b(\d{1,6})\s*text\s?box(?:es)?\b", re.IGNORECASE)
_TEXTBOX_MENTION = re.compile(r"\btext\s?box|\binput", re.IGNORECASE)
_LABEL_PHRASE = re.compile(r"\b(\d{1,6})\s*labels?\b", re.IGNORECASE)

_LIST_KEYWORDS = ("list view", "list")
_SOUND_KEYWORDS = ("sound", "play")
_IMAGE_KEYWORDS = ("gui via image", "image", "picture")


@dataclass(frozen=True)
class TokenMatch:
    """A ``button<N>`` reference and where it sits in the text."""

    index: int
    start: int
    end: int


def scan_button_tokens(text: str) -> list[TokenMatch]:
    """Return every ``button<N>`` token in textual order."""
    return [
        TokenMatch(index=int(m.group(1)), start=m.start(), end=m.end())
        for m in _BUTTON_TOKEN.finditer(text)
    ]


def nearest_preceding(tokens: list[TokenMatch], position: int) -> TokenMatch | None:
    """Last token that ends at or before ``position``.

    Best effort only: with several buttons mentioned before one phrase the
    closest one wins, which is not always what the author meant.
    """
    found = None
    for token in tokens:
        if token.end > position:
            break
        found = token
    return found


def _in_range(value: int, low: int, high: int) -> bool:
    return low <= value <= high


class RequirementParser:
    """Parses requirement prose into a ComponentPlan."""

    def parse(self, requirements: str | None, search_prompt: str | None = "", design_image_count: int = 0) -> ComponentPlan:
        """
        Parse requirement text.

        Args:
            requirements: Free text describing the app
            search_prompt: Search prompt; only scanned for feature keywords
            design_image_count: Number of uploaded design images

        Returns:
            ComponentPlan (empty plan when nothing matches)
        """
        text = requirements or ""
        feature_text = f"{text}\n{search_prompt or ''}".lower()
        tokens = scan_button_tokens(text)

        button_count = self._button_count(text, tokens)
        textbox_count = self._textbox_count(feature_text)
        plan = ComponentPlan(
            button_count=button_count,
            list_view_requested=any(k in feature_text for k in _LIST_KEYWORDS),
            textbox_count=textbox_count,
            extra_label_count=self._extra_label_count(text),
            sound_requested=any(k in feature_text for k in _SOUND_KEYWORDS),
            image_components_requested=design_image_count > 0
            and any(k in feature_text for k in _IMAGE_KEYWORDS),
            button_actions=self._button_actions(text, tokens),
        )
        logger.debug(
            "requirements_parsed",
            button_count=plan.button_count,
            actions=sum(len(v) for v in plan.button_actions.values()),
            list_view=plan.list_view_requested,
            textboxes=plan.textbox_count,
        )
        return plan

    def _button_count(self, text: str, tokens: list[TokenMatch]) -> int:
        """Largest in-range count from button tokens and count phrases; 0 if none."""
        candidates = [t.index for t in tokens if _in_range(t.index, 1, MAX_BUTTONS)]

        phrase_counts = [int(m.group(1)) for m in _BUTTON_PHRASE.finditer(text)]
        if not phrase_counts:
            phrase_counts = [WORD_NUMBERS.get(m.group(1).casefold(), 0) for m in _BUTTON_WORD_PHRASE.finditer(text)]
        candidates.extend(n for n in phrase_counts if _in_range(n, 1, MAX_BUTTONS))

        return max(candidates, default=0)

    def _textbox_count(self, text: str) -> int:
        explicit = [int(m.group(1)) for m in _TEXTBOX_PHRASE.finditer(text)]
        if explicit:
            return min(max(explicit), MAX_TEXTBOXES)
        return 1 if _TEXTBOX_MENTION.search(text) else 0

    def _extra_label_count(self, text: str) -> int:
        explicit = [int(m.group(1)) for m in _LABEL_PHRASE.finditer(text)]
        return min(max(explicit, default=0), MAX_EXTRA_LABELS)

    def _button_actions(self, text: str, tokens: list[TokenMatch]) -> dict[int, list[ButtonEffect]]:
        found: list[tuple[int, ButtonEffect]] = []

        for line in text.splitlines():
            for m in _CLICK_COLOR_ACTION.finditer(line):
                effect = ButtonEffect(kind=EffectKind.SET_BACKGROUND_COLOR, argument=m.group(2).lower())
                found.append((int(m.group(1)), effect))

        for m in _SCREEN_COLOR_ACTION.finditer(text):
            owner = nearest_preceding(tokens, m.start())
            if owner is None:
                continue
            effect = ButtonEffect(kind=EffectKind.SET_BACKGROUND_COLOR, argument=m.group(2).lower())
            found.append((owner.index, effect))

        actions: dict[int, list[ButtonEffect]] = {}
        for index, effect in found:
            effects = actions.setdefault(index, [])
            if effect not in effects:
                effects.append(effect)
        return actions


def parse_requirements(requirements: str | None, search_prompt: str | None = "", design_image_count: int = 0) -> ComponentPlan:
    """
    Convenience function to parse requirement text

    Args:
        requirements: Free text requirements
        search_prompt: Search prompt
        design_image_count: Number of uploaded design images

    Returns:
        ComponentPlan
    """
    return RequirementParser().parse(requirements, search_prompt, design_image_count)
