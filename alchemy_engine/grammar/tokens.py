"""Tokenizers and the flag classifier.

Two tokenizers with different quote policies live here:

``tokenize`` keeps quote characters inside the token and emits ``(`` / ``)``
as standalone tokens. The validator and splitter use it so that quoted
literals pass through byte-for-byte.

``split_literal_args`` removes quotes, honours backslash escapes and does not
treat parentheses specially. The effect parser and the invocation sanitizer
use it because they need the literal argument values an engine would see.
"""

from __future__ import annotations

import re

from .registry import GROUP_CLOSE, GROUP_OPEN, is_group

_WHITESPACE = (" ", "\t")
_QUOTES = ("'", '"')
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity")
_NEEDS_QUOTING = set(" \t()'\"\\")


def is_number(token: str) -> bool:
    return bool(_NUMBER_PATTERN.fullmatch(token))


def is_flag(token: str) -> bool:
    """True for ``-name`` / ``+name`` tokens, false for signed numbers and offsets.

    ``-10``, ``+5+5`` and ``-.5`` are arguments; so is anything that parses
    as a number as a whole.
    """
    if len(token) <= 1:
        return False
    if token[0] not in ("-", "+"):
        return False
    second = token[1]
    if second in "0123456789.":
        return False
    if is_number(token):
        return False
    return True


def tokenize(raw: str) -> list[str]:
    tokens: list[str] = []
    text = raw.strip()
    length = len(text)
    idx = 0
    while idx < length:
        char = text[idx]
        if char in _WHITESPACE:
            idx += 1
            continue
        if char in _QUOTES:
            end = idx + 1
            while end < length and text[end] != char:
                end += 1
            # unterminated quotes run to the end of the string
            tokens.append(text[idx : end + 1])
            idx = end + 1
            continue
        if char == GROUP_OPEN or char == GROUP_CLOSE:
            tokens.append(char)
            idx += 1
            continue
        end = idx
        while end < length and text[end] not in _WHITESPACE and text[end] not in (GROUP_OPEN, GROUP_CLOSE):
            end += 1
        tokens.append(text[idx:end])
        idx = end
    return tokens


def split_literal_args(raw: str) -> list[str]:
    args: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False
    for char in raw:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if quote:
            if char == quote:
                quote = None
            else:
                current.append(char)
            continue
        if char in _QUOTES:
            quote = char
        elif char in _WHITESPACE:
            if current:
                args.append("".join(current))
                current = []
        else:
            current.append(char)
    if current:
        args.append("".join(current))
    return args


def quote_literal(value: str) -> str:
    """Inverse of ``split_literal_args`` for a single value."""
    if not value or not any(char in _NEEDS_QUOTING for char in value):
        return value
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def peek_args(tokens: list[str], start: int) -> list[str]:
    """Collect the run of argument tokens starting at ``start``.

    Stops at the first flag or group delimiter.
    """
    args: list[str] = []
    for token in tokens[start:]:
        if is_group(token) or is_flag(token):
            break
        args.append(token)
    return args
