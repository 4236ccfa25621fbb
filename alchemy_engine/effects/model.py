"""Editable effect records."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class NumericArgument:
    label: str
    value: float
    minimum: float
    maximum: float
    step: float
    unit: str = ""
    kind: str = field(default="number", init=False)


@dataclass
class ColorArgument:
    label: str
    value: str
    kind: str = field(default="color", init=False)


@dataclass
class SelectArgument:
    label: str
    value: str
    options: tuple[str, ...] = ()
    kind: str = field(default="select", init=False)


@dataclass
class TextArgument:
    label: str
    value: str
    # verbatim values are already in command syntax and are emitted unquoted
    verbatim: bool = False
    kind: str = field(default="text", init=False)


EffectArgument = NumericArgument | ColorArgument | SelectArgument | TextArgument


@dataclass
class Effect:
    name: str
    flag: str
    args: list[EffectArgument] = field(default_factory=list)


def canonical_flag(token: str) -> str:
    """``-blur`` -> ``blur``; ``+noise`` keeps its sign."""
    return token[1:] if token.startswith("-") else token


def flag_token(flag: str) -> str:
    return flag if flag.startswith("+") else f"-{flag}"


def format_number(value: float) -> str:
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)
