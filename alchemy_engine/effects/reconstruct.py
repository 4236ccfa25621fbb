"""Render an effect list back into command text."""

from __future__ import annotations

from ..grammar.registry import REGION_CLOSE
from .families import family_for
from .model import Effect


def render_effect(effect: Effect, scope_open: bool = False) -> str:
    return family_for(effect.flag).render(effect, scope_open)


def reconstruct_command(effects: list[Effect]) -> str:
    """Join rendered effects; disabled toggles render to nothing and are dropped.

    Channel-scoped operations get their own ``-channel RGB ... +channel``
    wrapper unless an explicit channel selection is already open.
    """
    parts: list[str] = []
    scope_open = False
    for effect in effects:
        text = render_effect(effect, scope_open)
        if effect.flag == REGION_CLOSE:
            scope_open = False
        elif effect.flag == "channel":
            scope_open = True
        if text:
            parts.append(text)
    return " ".join(parts)
