from __future__ import annotations

import pytest

from alchemy_engine.effects.model import Effect, NumericArgument, TextArgument
from alchemy_engine.effects.parser import parse_effects
from alchemy_engine.effects.reconstruct import reconstruct_command
from alchemy_engine.presets import CATALOGS


def _toggle(flag: str, value: float) -> Effect:
    return Effect(name=flag.title(), flag=flag, args=[NumericArgument("Active", value, 0, 1, 1)])


def _rebuild(text: str) -> str:
    return reconstruct_command(parse_effects(text))


def test_empty() -> None:
    assert reconstruct_command([]) == ""


def test_basic_numeric() -> None:
    assert _rebuild("-charcoal 5") == "-charcoal 5"
    assert _rebuild("-implode -0.5") == "-implode -0.5"
    assert _rebuild("-solarize 50") == "-solarize 50%"


def test_toggle_on_and_off() -> None:
    assert reconstruct_command([_toggle("negate", 1)]) == "-channel RGB -negate +channel"
    assert reconstruct_command([_toggle("negate", 0)]) == ""
    assert reconstruct_command([_toggle("flip", 0.4), _toggle("flop", 0.6)]) == "-flop"


def test_grayscale_renders_colorspace() -> None:
    assert reconstruct_command([_toggle("grayscale", 1)]) == "-colorspace Gray"


def test_edge_gets_channel_wrapper() -> None:
    edge = Effect(name="Edge", flag="edge", args=[NumericArgument("Edge", 3, 0, 20, 0.5)])
    assert reconstruct_command([edge]) == "-channel RGB -edge 3 +channel"


def test_open_channel_scope_suppresses_wrapper() -> None:
    assert _rebuild("-channel RGB -negate -edge 2 +channel") == "-channel RGB -negate -edge 2 +channel"
    assert _rebuild("-channel R -negate +channel -negate") == (
        "-channel R -negate +channel -channel RGB -negate +channel"
    )


def test_lists_and_structures() -> None:
    assert _rebuild("-modulate 150,200") == "-modulate 150%,200%,100%"
    assert _rebuild("-sigmoidal-contrast 10x50%") == "-sigmoidal-contrast 10,50%"
    assert _rebuild("-morphology Dilate Disk") == "-morphology Dilate Disk:1"
    assert _rebuild("-morphology Dilate Rectangle:20x1") == "-morphology Dilate Rectangle:20x1"
    assert _rebuild("-morphology Thinning:20 Skeleton") == "-morphology Thinning:20 Skeleton"
    assert _rebuild("-distort Polar") == "-distort Polar 0"
    assert _rebuild("-evaluate Sin 2") == "-evaluate Sin 2"


def test_plus_flags_are_space_joined() -> None:
    assert _rebuild("+noise Laplacian +repage") == "+noise Laplacian +repage"


def test_text_with_specials_is_requoted() -> None:
    assert _rebuild("-fx 'u+(rand()-0.5)'") == "-fx 'u+(rand()-0.5)'"
    assert _rebuild("-morphology Convolve '3x3: 1,0,1'") == "-morphology Convolve '3x3: 1,0,1'"


def test_generic_arguments_are_verbatim() -> None:
    assert _rebuild("-statistic Maximum 20x1") == "-statistic Maximum 20x1"


def test_edited_argument_is_reflected() -> None:
    effects = parse_effects("-blur 3 -swirl 90")
    effects[1].args[0].value = 45
    assert reconstruct_command(effects) == "-blur 3 -swirl 45"


def test_text_slot_with_numbers_uses_spaces() -> None:
    effect = Effect(name="Roll", flag="roll", args=[TextArgument("Geometry", "+5+0")])
    assert reconstruct_command([effect]) == "-roll +5+0"


ROUND_TRIP_SAMPLES = [
    "",
    "-charcoal 5 -blur 0x5 -swirl 180",
    "-channel RGB -negate +channel -alpha opaque",
    "-negate -edge 2 -grayscale",
    "-morphology Erode -morphology Dilate Disk:0 -morphology Open Diamond:3x0",
    "-morphology Convolve 3x3:1,0,1",
    "-fill 'rgb(1, 2, 3)' -tint 40 -opaque black",
    "-fx 'it\\'s (odd)' -level 0%,90%",
    "-channel R -roll +13+0 -channel B -roll -13+0 +channel",
    "-evaluate Add 0x5 -function Polynomial -1,1 -distort",
    "-modulate abc -sigmoidal-contrast 7 -sample 13% -sample 800",
    "( +clone -negate ) -compose Screen -composite",
    "-blur -charcoal -channel RGB -edge +channel",
    "stray tokens +channel -channel",
    "-morphology Dilate Disk:1e999",
    "-modulate 1e999",
    "-charcoal 1e999 -evaluate Add 1e999",
]


@pytest.mark.parametrize("text", ROUND_TRIP_SAMPLES)
def test_round_trip_is_stable(text: str) -> None:
    once = _rebuild(text)
    assert _rebuild(once) == once


@pytest.mark.parametrize(
    "command",
    [command for catalog in CATALOGS.values() for command in catalog.values()],
)
def test_presets_round_trip(command: str) -> None:
    once = _rebuild(command)
    assert _rebuild(once) == once


def test_overflowing_numbers_are_not_rendered_as_inf() -> None:
    assert _rebuild("-morphology Dilate Disk:1e999") == "-morphology Dilate Disk:0"
    assert _rebuild("-modulate 1e999") == "-modulate 100%,100%,100%"
    assert _rebuild("-charcoal 1e999") == "-charcoal 1e999"
