"""Split validated command text into independently toggleable stack entries."""

from __future__ import annotations

from dataclasses import dataclass

from .registry import (
    GROUP_CLOSE,
    GROUP_OPEN,
    REGION_CLOSE,
    REGION_OPEN,
    SAFETY_ARG,
    SAFETY_FLAG,
    arity_of,
)
from .tokens import is_flag, peek_args, tokenize

LAYER_GROUP_LABEL = "Layer Group"
_LABEL_ARG_LIMIT = 10


@dataclass(frozen=True)
class SplitEntry:
    label: str
    command: str


def format_label(flag: str, args: list[str] | None = None) -> str:
    """``-liquid-rescale`` -> ``Liquid Rescale``; arguments are appended, shortened."""
    words = flag.lstrip("-+").split("-")
    name = " ".join(word[:1].upper() + word[1:] for word in words)
    if args:
        shown = [arg if len(arg) <= _LABEL_ARG_LIMIT else f"{arg[:8]}.." for arg in args]
        name = f"{name} {' '.join(shown)}"
    return name


def _matching_close(tokens: list[str], start: int, opener: str, closer: str) -> int:
    depth = 0
    for idx in range(start, len(tokens)):
        if tokens[idx] == opener:
            depth += 1
        elif tokens[idx] == closer:
            depth -= 1
            if depth == 0:
                return idx
    return -1


def _region_label(tokens: list[str], start: int, end: int) -> str:
    target = tokens[start + 1] if start + 1 < end else ""
    operations = [format_label(token) for token in tokens[start + 2 : end] if is_flag(token)]
    label = f"{target} Channel".strip()
    if operations:
        label += f": {', '.join(operations[:2])}"
        if len(operations) > 2:
            label += "..."
    return label


def split_command(command: str) -> list[SplitEntry]:
    tokens = tokenize(command)
    entries: list[SplitEntry] = []

    idx = 0
    while idx < len(tokens):
        token = tokens[idx]

        if token == REGION_OPEN:
            end = _matching_close(tokens, idx, REGION_OPEN, REGION_CLOSE)
            if end != -1:
                entries.append(
                    SplitEntry(label=_region_label(tokens, idx, end), command=" ".join(tokens[idx : end + 1]))
                )
                idx = end + 1
                continue

        if token == GROUP_OPEN:
            end = _matching_close(tokens, idx, GROUP_OPEN, GROUP_CLOSE)
            if end != -1:
                entries.append(SplitEntry(label=LAYER_GROUP_LABEL, command=" ".join(tokens[idx : end + 1])))
                idx = end + 1
                continue

        if not is_flag(token):
            idx += 1
            continue

        if token == REGION_CLOSE:
            idx += 1
            continue

        args = peek_args(tokens, idx + 1)[: arity_of(token)]
        idx += 1 + len(args)
        if token == SAFETY_FLAG and args[:1] == [SAFETY_ARG]:
            continue
        entries.append(SplitEntry(label=format_label(token, args), command=" ".join([token, *args])))

    return entries
