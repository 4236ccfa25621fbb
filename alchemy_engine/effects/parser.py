"""Structural decomposition of a command into editable effects."""

from __future__ import annotations

from ..grammar.registry import REGION_CLOSE, REGION_OPEN
from ..grammar.tokens import is_flag, split_literal_args
from .families import GENERIC_FAMILY, SCOPE_TARGET, family_for
from .model import Effect, canonical_flag


def _parse_flag(tokens: list[str], idx: int) -> tuple[Effect, int]:
    token = tokens[idx]
    parsed = family_for(canonical_flag(token)).parse(token, tokens, idx + 1)
    if parsed is None:
        parsed = GENERIC_FAMILY.parse(token, tokens, idx + 1)
    return parsed


def _parse_scoped(tokens: list[str], idx: int) -> tuple[Effect, int] | None:
    """``-channel RGB -negate +channel`` collapses into a single negate effect."""
    if idx + 2 >= len(tokens) or tokens[idx + 1] != SCOPE_TARGET:
        return None
    inner = tokens[idx + 2]
    if not is_flag(inner):
        return None
    family = family_for(canonical_flag(inner))
    if not family.channel_scoped:
        return None
    parsed = family.parse(inner, tokens, idx + 3)
    if parsed is None:
        return None
    effect, end = parsed
    if end >= len(tokens) or tokens[end] != REGION_CLOSE:
        return None
    return effect, end + 1


def parse_effects(command: str) -> list[Effect]:
    tokens = split_literal_args(command)
    effects: list[Effect] = []

    idx = 0
    while idx < len(tokens):
        token = tokens[idx]
        if not is_flag(token):
            idx += 1
            continue
        parsed = _parse_scoped(tokens, idx) if token == REGION_OPEN else None
        if parsed is None:
            parsed = _parse_flag(tokens, idx)
        effect, idx = parsed
        effects.append(effect)

    return effects
