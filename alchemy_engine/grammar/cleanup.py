"""Pre-clean passes for model-generated command text."""

from __future__ import annotations

import re

PLACEHOLDER_VALUE = "1"

_FENCE_PATTERN = re.compile(r"```[a-z]*\n?", re.IGNORECASE)
_PLACEHOLDER_PATTERN = re.compile(r"<[^>]+>")
_NEWLINE_PATTERN = re.compile(r"[\r\n]+")
_VALIDATOR_PREFIX_PATTERN = re.compile(r"^(magick|convert)\s+", re.IGNORECASE)
_INVOCATION_PREFIX_PATTERN = re.compile(r"^(magick|convert|magica)\s+", re.IGNORECASE)
_FILENAME_PATTERN = re.compile(
    r"\b(input|output|source|out|result)\.(png|jpg|jpeg|gif|webp|tiff|bmp|rgba)\b",
    re.IGNORECASE,
)


def strip_code_fences(text: str) -> str:
    return _FENCE_PATTERN.sub("", text).replace("`", "")


def strip_tool_prefix(text: str, *, include_wasm: bool = False) -> str:
    pattern = _INVOCATION_PREFIX_PATTERN if include_wasm else _VALIDATOR_PREFIX_PATTERN
    return pattern.sub("", text)


def strip_filenames(text: str) -> str:
    return _FILENAME_PATTERN.sub("", text)


def replace_placeholders(text: str) -> str:
    return _PLACEHOLDER_PATTERN.sub(PLACEHOLDER_VALUE, text)


def collapse_newlines(text: str) -> str:
    return _NEWLINE_PATTERN.sub(" ", text).strip()


def preclean(text: str) -> str:
    """Validator pre-clean: fences, tool prefix, placeholders, line breaks."""
    cleaned = strip_code_fences(text)
    cleaned = strip_tool_prefix(cleaned.lstrip())
    cleaned = replace_placeholders(cleaned)
    return collapse_newlines(cleaned)
