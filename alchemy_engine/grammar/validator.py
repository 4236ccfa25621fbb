"""Tolerant validation of generated command text.

Unknown flags, malformed arguments and stray tokens are stripped rather than
rejected; everything that survives is a safe subset of the input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .cleanup import preclean
from .registry import FlagRule, is_allowed, is_group, rule_for
from .tokens import is_flag, peek_args, tokenize

_GEOMETRY_PREFIX = re.compile(r"^\d+x\d+")


@dataclass
class ValidationResult:
    command: str
    stripped: list[str] = field(default_factory=list)


def _is_custom_kernel(value: str) -> bool:
    return value.startswith(("'", '"')) or bool(_GEOMETRY_PREFIX.match(value))


def _check_arguments(flag: str, rule: FlagRule, args: list[str]) -> str | None:
    if rule.first_values is not None and args:
        candidate = args[0].split(":")[0] if rule.strip_suffix else args[0]
        if candidate not in rule.first_values:
            return f'{flag} {" ".join(args)} (invalid value "{candidate}")'
    if rule.second_values is not None and len(args) > 1:
        second = args[1]
        if not _is_custom_kernel(second):
            candidate = second.split(":")[0]
            if candidate not in rule.second_values:
                return f'{flag} {" ".join(args)} (invalid kernel "{candidate}")'
    return None


def validate_command(raw: str) -> ValidationResult:
    tokens = tokenize(preclean(raw))
    kept: list[str] = []
    stripped: list[str] = []

    idx = 0
    while idx < len(tokens):
        token = tokens[idx]

        if is_group(token):
            kept.append(token)
            idx += 1
            continue

        if not is_flag(token):
            stripped.append(f'"{token}" (stray token)')
            idx += 1
            continue

        if not is_allowed(token):
            stray = peek_args(tokens, idx + 1)
            suffix = f" {' '.join(stray)}" if stray else ""
            stripped.append(f"{token}{suffix} (unknown flag)")
            idx += 1 + len(stray)
            continue

        rule = rule_for(token)
        if rule is None:
            kept.append(token)
            idx += 1
            continue

        available = peek_args(tokens, idx + 1)
        if len(available) < rule.arity:
            stripped.append(f"{token} (missing arguments, need {rule.arity}, got {len(available)})")
            idx += 1 + len(available)
            continue

        args = available[: rule.arity]
        problem = _check_arguments(token, rule, args)
        if problem:
            stripped.append(problem)
        else:
            kept.append(token)
            kept.extend(args)
        idx += 1 + rule.arity

    return ValidationResult(command=" ".join(kept), stripped=stripped)
