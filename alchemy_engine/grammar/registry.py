"""Flag grammar shared by validation, splitting and effect parsing."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


MORPHOLOGY_METHODS: tuple[str, ...] = (
    "Erode", "Dilate", "Open", "Close", "Smooth", "Edge",
    "EdgeIn", "EdgeOut", "TopHat", "BottomHat",
    "HitAndMiss", "Thinning", "Thicken",
    "Convolve", "Correlate", "Distance",
)

MORPHOLOGY_KERNELS: tuple[str, ...] = (
    # shaped kernels, sized with :N or :WxH
    "Diamond", "Square", "Octagon", "Disk", "Plus", "Cross", "Ring", "Rectangle",
    # hit-and-miss and special kernels
    "ConvexHull", "Skeleton", "Edges", "Corners",
    "Diagonals", "LineEnds", "LineJunctions", "Ridges",
    "ThinSE", "Peaks",
    # convolution kernels
    "Unity", "Gaussian", "DoG", "LoG", "Blur", "Comet", "Binomial",
    # distance kernels
    "Chebyshev", "Manhattan", "Euclidean",
)

EVALUATE_FUNCTIONS: tuple[str, ...] = (
    "Add", "Subtract", "Multiply", "Divide",
    "Sin", "Cos", "Pow", "Log", "Exp",
    "And", "Or", "Xor", "Min", "Max",
    "Set", "Abs", "Mean", "Median",
    "GaussianNoise", "InverseLog",
    "Arcsin", "Arccos", "Arctan",
)

COLORSPACES: tuple[str, ...] = (
    "Gray", "sRGB", "RGB", "LAB", "HSL", "HSB",
    "CMYK", "CMYKA", "XYZ", "YCbCr", "YIQ", "YUV",
    "Transparent", "OHTA", "Rec601Luma", "Rec709Luma",
)

COMPOSE_METHODS: tuple[str, ...] = (
    "Screen", "Multiply", "Overlay",
    "Darken", "Lighten", "Difference", "Exclusion",
    "Add", "Subtract", "HardLight", "SoftLight",
    "ColorDodge", "ColorBurn", "LinearDodge", "LinearBurn",
    "Over", "In", "Out", "Atop", "Xor",
    "Plus", "Minus", "Bumpmap", "Dissolve",
)

VIRTUAL_PIXEL_METHODS: tuple[str, ...] = (
    "Tile", "Edge", "Mirror", "Black", "White",
    "Background", "Transparent", "Dither",
    "Random", "CheckerTile", "HorizontalTile", "VerticalTile",
)

DISTORT_METHODS: tuple[str, ...] = (
    "ARC", "SRT", "Barrel", "BarrelInverse",
    "Perspective", "BilinearForward", "BilinearReverse",
    "Polar", "DePolar", "Shepards", "Affine",
    "AffineProjection", "ScaleRotateTranslate",
)

NOISE_TYPES: tuple[str, ...] = (
    "Gaussian", "Impulse", "Laplacian",
    "Multiplicative", "Poisson", "Random", "Uniform",
)

CHANNELS: tuple[str, ...] = (
    "RGB", "Red", "Green", "Blue", "Alpha",
    "Cyan", "Magenta", "Yellow", "Black",
    "Opacity", "Index", "RGBA",
    "CMYK", "CMYKA", "All",
    "R", "G", "B", "A",
    "C", "M", "Y", "K",
)

FUNCTION_METHODS: tuple[str, ...] = ("Sinusoid", "Arcsin", "Arctan", "Polynomial")

DITHER_METHODS: tuple[str, ...] = ("FloydSteinberg", "Riemersma", "None")

# Shaped kernels default to radius 1 when written without a size.
SHAPED_KERNELS = frozenset({"Disk", "Square", "Diamond", "Octagon"})

GROUP_OPEN = "("
GROUP_CLOSE = ")"
REGION_OPEN = "-channel"
REGION_CLOSE = "+channel"

# Appended by the pipeline, never user content.
SAFETY_FLAG = "-alpha"
SAFETY_ARG = "opaque"


@dataclass(frozen=True)
class FlagRule:
    flag: str
    arity: int
    first_values: frozenset[str] | None = None
    second_values: frozenset[str] | None = None
    strip_suffix: bool = False


def _rules(arity: int, *flags: str) -> tuple[FlagRule, ...]:
    return tuple(FlagRule(flag, arity) for flag in flags)


FLAG_RULE_LIST: tuple[FlagRule, ...] = (
    *_rules(
        0,
        "-negate", "-auto-level", "-auto-gamma", "-normalize", "-despeckle",
        "-strip", "-flip", "-flop", "+repage", "-composite", "+channel",
        "+clone", "-trim", "-monochrome",
    ),
    *_rules(
        1,
        "-seed", "-spread", "-implode", "-swirl", "-resize", "-filter",
        "-charcoal", "-solarize", "-blue-shift", "-sepia-tone", "-posterize",
        "-edge", "-emboss", "-blur", "-gaussian-blur", "-motion-blur",
        "-radial-blur", "-adaptive-blur", "-adaptive-sharpen", "-sharpen",
        "-median", "-paint", "-sketch", "-vignette", "-threshold",
        "-black-threshold", "-white-threshold", "-gamma", "-rotate", "-roll",
        "-contrast-stretch", "-brightness-contrast", "-level", "-canny",
        "-define", "-crop", "-clone", "-delete", "-layers", "-fx", "-wave",
        "-liquid-rescale", "-sample", "-attenuate", "-colors", "-dither",
        "-sigmoidal-contrast", "-lat", "-alpha", "-fill", "-tint",
        "-modulate", "-opaque",
    ),
    FlagRule("-statistic", 2),
    FlagRule("-colorspace", 1, frozenset(COLORSPACES)),
    FlagRule("-channel", 1, frozenset(CHANNELS)),
    FlagRule("-compose", 1, frozenset(COMPOSE_METHODS)),
    FlagRule("-virtual-pixel", 1, frozenset(VIRTUAL_PIXEL_METHODS)),
    FlagRule("+noise", 1, frozenset(NOISE_TYPES)),
    FlagRule(
        "-morphology",
        2,
        frozenset(MORPHOLOGY_METHODS),
        frozenset(MORPHOLOGY_KERNELS),
        strip_suffix=True,
    ),
    FlagRule("-evaluate", 2, frozenset(EVALUATE_FUNCTIONS)),
    FlagRule("-distort", 2, frozenset(DISTORT_METHODS)),
    FlagRule("-function", 2, frozenset(FUNCTION_METHODS)),
)

FLAG_RULES: Mapping[str, FlagRule] = MappingProxyType({rule.flag: rule for rule in FLAG_RULE_LIST})

# Accepted as-is; their arguments (if any) are not checked.
PASSTHROUGH_FLAGS: tuple[str, ...] = ("-auto-orient", "+dither")

ALLOWED_FLAGS: frozenset[str] = frozenset(
    {
        # randomization & geometry
        "-seed", "-spread", "-implode", "-swirl",
        "-resize", "-crop", "-trim",
        "+repage", "-rotate", "-flip", "-flop",
        "-filter",
        # color & tone
        "-colorspace", "-channel", "+channel",
        "-negate", "-auto-level", "-auto-gamma",
        "-normalize", "-contrast-stretch",
        "-brightness-contrast", "-gamma", "-level",
        "-threshold", "-black-threshold", "-white-threshold",
        "-modulate", "-fill", "-tint", "-sigmoidal-contrast",
        "-monochrome", "-colors", "-dither", "-opaque",
        # evaluate & function
        "-evaluate", "-function",
        # effects & filters
        "-charcoal", "-solarize", "-blue-shift",
        "-sepia-tone", "-posterize", "-edge", "-emboss",
        "-blur", "-gaussian-blur", "-motion-blur",
        "-adaptive-blur", "-adaptive-sharpen", "-sharpen",
        "-despeckle", "-median", "-paint", "-sketch", "-vignette",
        "-wave", "-lat", "-statistic", "-fx",
        "+noise",
        "-morphology", "-canny",
        # layers
        "-clone", "+clone", "-delete", "-layers",
        "-compose", "-composite",
        "-roll",
        # distortion
        "-virtual-pixel", "-distort",
        # misc
        "-define", "-strip", "-sample", "-attenuate", "-alpha",
        *PASSTHROUGH_FLAGS,
    }
)


def is_allowed(flag: str) -> bool:
    return flag in ALLOWED_FLAGS


def rule_for(flag: str) -> FlagRule | None:
    return FLAG_RULES.get(flag)


def arity_of(flag: str) -> int:
    rule = FLAG_RULES.get(flag)
    return rule.arity if rule else 0


def is_group(token: str) -> bool:
    return token == GROUP_OPEN or token == GROUP_CLOSE
