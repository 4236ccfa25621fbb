"""Per-flag decomposition policies.

Each family knows how to turn a flag plus the tokens that follow it into an
``Effect`` and how to render that effect back into command text. ``parse``
returns ``None`` when the flag's required argument is missing; the caller
then falls back to the generic family.
"""

from __future__ import annotations

import math
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ..grammar.registry import (
    CHANNELS,
    COLORSPACES,
    COMPOSE_METHODS,
    DISTORT_METHODS,
    DITHER_METHODS,
    EVALUATE_FUNCTIONS,
    FUNCTION_METHODS,
    MORPHOLOGY_KERNELS,
    MORPHOLOGY_METHODS,
    NOISE_TYPES,
    REGION_CLOSE,
    REGION_OPEN,
    SHAPED_KERNELS,
    VIRTUAL_PIXEL_METHODS,
    is_group,
)
from ..grammar.tokens import is_flag, quote_literal
from .model import (
    ColorArgument,
    Effect,
    EffectArgument,
    NumericArgument,
    SelectArgument,
    TextArgument,
    canonical_flag,
    flag_token,
    format_number,
)

TOGGLE_THRESHOLD = 0.5
SCOPE_TARGET = "RGB"

_NUMBER = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_CLEAN_NUMBER = re.compile(rf"({_NUMBER})(%?)")
_LEADING_NUMBER = re.compile(_NUMBER)

ParseResult = tuple[Effect, int] | None


def parse_number(text: str | None) -> tuple[float, str] | None:
    """``"50%"`` -> ``(50.0, "%")``; anything that is not a clean finite number -> None."""
    if not text:
        return None
    match = _CLEAN_NUMBER.fullmatch(text)
    if not match:
        return None
    value = float(match.group(1))
    if not math.isfinite(value):
        return None
    return value, match.group(2)


def leading_number(text: str, default: float = 0.0) -> float:
    match = _LEADING_NUMBER.match(text.strip())
    if not match:
        return default
    value = float(match.group(0))
    # overflowing values such as 1e999 count as no number
    return value if math.isfinite(value) else default


def _next_arg(tokens: list[str], idx: int) -> str | None:
    if idx < len(tokens) and not is_flag(tokens[idx]) and not is_group(tokens[idx]):
        return tokens[idx]
    return None


def slot_text(arg: EffectArgument) -> str:
    if isinstance(arg, NumericArgument):
        return f"{format_number(arg.value)}{arg.unit}"
    if isinstance(arg, TextArgument) and arg.verbatim:
        return arg.value
    return quote_literal(str(arg.value))


def _looks_numeric(arg: EffectArgument) -> bool:
    if isinstance(arg, NumericArgument):
        return True
    return parse_number(str(arg.value)) is not None


def render_default(effect: Effect) -> str:
    head = flag_token(effect.flag)
    values = [text for text in (slot_text(arg) for arg in effect.args) if text]
    if not values:
        return head
    # any non-numeric slot switches the whole list to spaces
    if effect.flag.startswith("+") or not all(_looks_numeric(arg) for arg in effect.args):
        return f"{head} {' '.join(values)}"
    return f"{head} {','.join(values)}"


def wrap_scope(body: str) -> str:
    return f"{REGION_OPEN} {SCOPE_TARGET} {body} {REGION_CLOSE}"


class EffectFamily(ABC):
    channel_scoped = False

    @abstractmethod
    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        ...

    def render(self, effect: Effect, scope_open: bool = False) -> str:
        body = render_default(effect)
        if self.channel_scoped and not scope_open:
            return wrap_scope(body)
        return body


class ToggleFamily(EffectFamily):
    def __init__(self, name: str, *, channel_scoped: bool = False, emit: str | None = None) -> None:
        self.name = name
        self.channel_scoped = channel_scoped
        self.emit = emit

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        effect = Effect(
            name=self.name,
            flag=canonical_flag(flag),
            args=[NumericArgument("Active", 1, 0, 1, 1)],
        )
        return effect, start

    def render(self, effect: Effect, scope_open: bool = False) -> str:
        first = effect.args[0] if effect.args else None
        active = first.value if isinstance(first, NumericArgument) else 1
        if active <= TOGGLE_THRESHOLD:
            return ""
        body = self.emit or flag_token(effect.flag)
        if self.channel_scoped and not scope_open:
            return wrap_scope(body)
        return body


class NumericFamily(EffectFamily):
    """Single numeric slot; a non-numeric argument such as ``0x5`` stays text."""

    def __init__(
        self,
        name: str,
        minimum: float,
        maximum: float,
        step: float,
        unit: str = "",
        *,
        channel_scoped: bool = False,
    ) -> None:
        self.name = name
        self.minimum = minimum
        self.maximum = maximum
        self.step = step
        self.unit = unit
        self.channel_scoped = channel_scoped

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        raw = _next_arg(tokens, start)
        if raw is None:
            return None
        parsed = parse_number(raw)
        if parsed is None:
            arg: EffectArgument = TextArgument(self.name, raw)
        else:
            value, percent = parsed
            arg = NumericArgument(self.name, value, self.minimum, self.maximum, self.step, self.unit or percent)
        return Effect(name=self.name, flag=canonical_flag(flag), args=[arg]), start + 1


@dataclass(frozen=True)
class NumberSlot:
    label: str
    minimum: float
    maximum: float
    step: float
    unit: str
    neutral: float


class NumericListFamily(EffectFamily):
    """Comma separated numbers (``150,200,100``); bad or missing parts go neutral."""

    def __init__(self, name: str, slots: tuple[NumberSlot, ...]) -> None:
        self.name = name
        self.slots = slots

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        raw = _next_arg(tokens, start)
        if raw is None:
            return None
        parts = raw.replace("x", ",").split(",")
        args: list[EffectArgument] = []
        for idx, slot in enumerate(self.slots):
            parsed = parse_number(parts[idx].strip()) if idx < len(parts) else None
            value = parsed[0] if parsed else slot.neutral
            args.append(NumericArgument(slot.label, value, slot.minimum, slot.maximum, slot.step, slot.unit))
        return Effect(name=self.name, flag=canonical_flag(flag), args=args), start + 1


class StructuringElementFamily(EffectFamily):
    """``-morphology Method Kernel[:A[xB]]`` as method, kernel and two dimensions."""

    name = "Morphology"
    default_kernel = "Disk"

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        method = _next_arg(tokens, start)
        if method is None:
            return None
        kernel_token = _next_arg(tokens, start + 1)
        kernel, _, suffix = (kernel_token or "").partition(":")
        kernel = kernel or self.default_kernel
        first = second = 0.0
        if kernel not in MORPHOLOGY_KERNELS:
            # user-defined kernels ("3x3: 1,0,1") are carried through untouched
            kernel, suffix = kernel_token or kernel, ""
        elif suffix:
            if "x" in suffix:
                width, height = (suffix.split("x") + [""])[:2]
                first = leading_number(width)
                second = leading_number(height)
            else:
                first = leading_number(suffix)
        elif kernel in SHAPED_KERNELS:
            first = 1.0
        args: list[EffectArgument] = [
            SelectArgument("Method", method, MORPHOLOGY_METHODS),
            SelectArgument("Kernel", kernel, MORPHOLOGY_KERNELS),
            NumericArgument("Rad/W", first, 0, 50, 0.5),
            NumericArgument("Sig/H", second, 0, 50, 0.5),
        ]
        consumed = start + 2 if kernel_token is not None else start + 1
        return Effect(name=self.name, flag=canonical_flag(flag), args=args), consumed

    def render(self, effect: Effect, scope_open: bool = False) -> str:
        if len(effect.args) < 4:
            return render_default(effect)
        method, kernel, first, second = effect.args[:4]
        first_value = first.value if isinstance(first, NumericArgument) else leading_number(str(first.value))
        second_value = second.value if isinstance(second, NumericArgument) else leading_number(str(second.value))
        spec = str(kernel.value)
        sized = first_value > 0 or second_value > 0 or spec in SHAPED_KERNELS
        if sized and spec in MORPHOLOGY_KERNELS:
            spec += f":{format_number(first_value)}"
            if second_value > 0:
                spec += f"x{format_number(second_value)}"
        return f"{flag_token(effect.flag)} {quote_literal(str(method.value))} {quote_literal(spec)}"


class MethodParamFamily(EffectFamily):
    """``-flag Method param`` for distort, function and evaluate."""

    def __init__(self, name: str, methods: tuple[str, ...], *, numeric: bool, default: str) -> None:
        self.name = name
        self.methods = methods
        self.numeric = numeric
        self.default = default

    def _param(self, raw: str | None) -> EffectArgument:
        if not self.numeric:
            return TextArgument("Args", raw if raw is not None else self.default)
        parsed = parse_number(raw if raw is not None else self.default)
        if parsed is None:
            return TextArgument("Val", raw or self.default)
        value, percent = parsed
        return NumericArgument("Val", value, 0, 10, 0.1, percent)

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        method = _next_arg(tokens, start)
        if method is None:
            return None
        raw = _next_arg(tokens, start + 1)
        args = [SelectArgument("Method", method, self.methods), self._param(raw)]
        consumed = start + 2 if raw is not None else start + 1
        return Effect(name=self.name, flag=canonical_flag(flag), args=args), consumed

    def render(self, effect: Effect, scope_open: bool = False) -> str:
        if len(effect.args) < 2:
            return render_default(effect)
        method, param = effect.args[:2]
        return f"{flag_token(effect.flag)} {quote_literal(str(method.value))} {slot_text(param)}"


class SelectFamily(EffectFamily):
    def __init__(self, name: str, label: str, options: tuple[str, ...]) -> None:
        self.name = name
        self.label = label
        self.options = options

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        raw = _next_arg(tokens, start)
        if raw is None:
            return None
        arg = SelectArgument(self.label, raw, self.options)
        return Effect(name=self.name, flag=canonical_flag(flag), args=[arg]), start + 1


class ColorFamily(EffectFamily):
    def __init__(self, name: str, label: str) -> None:
        self.name = name
        self.label = label

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        raw = _next_arg(tokens, start)
        if raw is None:
            return None
        return Effect(name=self.name, flag=canonical_flag(flag), args=[ColorArgument(self.label, raw)]), start + 1


class TextFamily(EffectFamily):
    def __init__(self, name: str, label: str) -> None:
        self.name = name
        self.label = label

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        raw = _next_arg(tokens, start)
        if raw is None:
            return None
        return Effect(name=self.name, flag=canonical_flag(flag), args=[TextArgument(self.label, raw)]), start + 1


class ChannelResetFamily(EffectFamily):
    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        return Effect(name="Channel Reset", flag=REGION_CLOSE, args=[]), start

    def render(self, effect: Effect, scope_open: bool = False) -> str:
        return REGION_CLOSE


class GenericFamily(EffectFamily):
    """Anything without a policy: every following argument becomes one text slot."""

    def parse(self, flag: str, tokens: list[str], start: int) -> ParseResult:
        end = start
        while end < len(tokens) and not is_flag(tokens[end]) and not is_group(tokens[end]):
            end += 1
        raw = " ".join(quote_literal(token) for token in tokens[start:end])
        name = canonical_flag(flag)
        args: list[EffectArgument] = [TextArgument("Args", raw, verbatim=True)] if raw else []
        return Effect(name=name, flag=name, args=args), end


_MODULATE_SLOTS = (
    NumberSlot("Bright", 0, 200, 1, "%", 100),
    NumberSlot("Sat", 0, 300, 1, "%", 100),
    NumberSlot("Hue", 0, 200, 1, "%", 100),
)

_SIGMOIDAL_SLOTS = (
    NumberSlot("Str", 0, 20, 0.1, "", 3),
    NumberSlot("Mid", 0, 100, 1, "%", 50),
)

EFFECT_FAMILIES: Mapping[str, EffectFamily] = MappingProxyType(
    {
        # toggles
        "negate": ToggleFamily("Negate", channel_scoped=True),
        "grayscale": ToggleFamily("Grayscale", emit="-colorspace Gray"),
        "monochrome": ToggleFamily("Monochrome"),
        "auto-level": ToggleFamily("Auto Level"),
        "auto-gamma": ToggleFamily("Auto Gamma"),
        "normalize": ToggleFamily("Normalize"),
        "despeckle": ToggleFamily("Despeckle"),
        "flip": ToggleFamily("Flip"),
        "flop": ToggleFamily("Flop"),
        "trim": ToggleFamily("Trim"),
        # single numbers
        "charcoal": NumericFamily("Charcoal", 0, 10, 0.1),
        "swirl": NumericFamily("Swirl", -360, 360, 5),
        "implode": NumericFamily("Implode", -2, 2, 0.05),
        "solarize": NumericFamily("Solarize", 0, 100, 1, "%"),
        "blue-shift": NumericFamily("Blue Shift", 0, 5, 0.05),
        "blur": NumericFamily("Blur", 0, 20, 0.5),
        "sepia-tone": NumericFamily("Sepia", 0, 100, 1, "%"),
        "posterize": NumericFamily("Posterize", 2, 64, 1),
        "edge": NumericFamily("Edge", 0, 20, 0.5, channel_scoped=True),
        "emboss": NumericFamily("Emboss", 0, 10, 0.5),
        "colors": NumericFamily("Colors", 2, 256, 1),
        "attenuate": NumericFamily("Attenuate", 0, 5, 0.1),
        "threshold": NumericFamily("Threshold", 0, 100, 1, "%"),
        "spread": NumericFamily("Spread", 0, 50, 1),
        "tint": NumericFamily("Tint Amount", 0, 100, 1, "%"),
        "sample": NumericFamily("Sample", 1, 2000, 1),
        # number lists
        "modulate": NumericListFamily("Modulate", _MODULATE_SLOTS),
        "sigmoidal-contrast": NumericListFamily("Contrast", _SIGMOIDAL_SLOTS),
        # structured
        "morphology": StructuringElementFamily(),
        "distort": MethodParamFamily("Distort", DISTORT_METHODS, numeric=False, default="0"),
        "function": MethodParamFamily("Function", FUNCTION_METHODS, numeric=False, default="0"),
        "evaluate": MethodParamFamily("Evaluate", EVALUATE_FUNCTIONS, numeric=True, default="0"),
        # selects
        "channel": SelectFamily("Channel", "Chan", CHANNELS),
        "colorspace": SelectFamily("Colorspace", "Space", COLORSPACES),
        "compose": SelectFamily("Blend Mode", "Mode", COMPOSE_METHODS),
        "virtual-pixel": SelectFamily("Virtual Pixel", "Method", VIRTUAL_PIXEL_METHODS),
        "dither": SelectFamily("Dither", "Method", DITHER_METHODS),
        "+noise": SelectFamily("Noise", "Type", NOISE_TYPES),
        # colors
        "fill": ColorFamily("Fill Color", "Fill"),
        "opaque": ColorFamily("Opaque", "Target"),
        # free text
        "roll": TextFamily("Roll", "Geometry"),
        "wave": TextFamily("Wave", "Geometry"),
        "lat": TextFamily("Lat", "Geometry"),
        "fx": TextFamily("FX Math", "Expr"),
        "level": TextFamily("Level", "Range"),
        "contrast-stretch": TextFamily("Stretch", "Range"),
        REGION_CLOSE: ChannelResetFamily(),
    }
)

GENERIC_FAMILY = GenericFamily()


def family_for(flag: str) -> EffectFamily:
    return EFFECT_FAMILIES.get(flag, GENERIC_FAMILY)
