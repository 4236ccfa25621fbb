"""Boundary sanitizer: assemble the literal engine invocation.

The engine reads a raw RGBA buffer of known geometry and, in preview mode,
writes one back. Preview output is always resized to the exact input
geometry so the caller can reinterpret the bytes without a header.
"""

from __future__ import annotations

from ..grammar.cleanup import (
    collapse_newlines,
    replace_placeholders,
    strip_code_fences,
    strip_filenames,
    strip_tool_prefix,
)
from ..grammar.tokens import split_literal_args

PROGRAM = "convert"
INPUT_FILE = "source.rgba"
OUTPUT_FILE = "out.rgba"
EXPORT_FILE = "out.jpg"
EXPORT_QUALITY = "90"
BIT_DEPTH = "8"
EMPTY_FALLBACK = "-negate"


def clean_user_text(raw: str) -> str:
    cleaned = strip_code_fences(raw)
    cleaned = strip_tool_prefix(cleaned, include_wasm=True)
    cleaned = strip_filenames(cleaned)
    cleaned = replace_placeholders(cleaned)
    return collapse_newlines(cleaned)


def build_invocation(raw: str, width: int, height: int, export: bool = False) -> list[str]:
    cleaned = clean_user_text(raw) or EMPTY_FALLBACK
    geometry = f"{width}x{height}"

    args = [PROGRAM, "-size", geometry, "-depth", BIT_DEPTH, INPUT_FILE]
    args.extend(split_literal_args(cleaned))
    if export:
        args.extend(["-quality", EXPORT_QUALITY, EXPORT_FILE])
    else:
        args.extend(["-filter", "Point", "-resize", f"{geometry}!", "-depth", BIT_DEPTH, OUTPUT_FILE])
    return args


def join_invocation(args: list[str]) -> str:
    return " ".join(f'"{arg}"' if (" " in arg or "\t" in arg) else arg for arg in args)


def sanitize_command(raw: str, width: int, height: int, export: bool = False) -> str:
    return join_invocation(build_invocation(raw, width, height, export))
