# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import re

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE,
)


def strip_dashes(name: str) -> str:
    """Removes a leading ``--`` or a single leading ``-`` from an option name."""
    if name.startswith("--"):
        return name[2:]
    if name.startswith("-"):
        return name[1:]
    return name


def parse_int(raw: str) -> int:
    """Parses a decimal integer which must span the whole string.

    Unlike ``int()``, surrounding whitespace and digit separators are rejected.
    """
    if _INT_PATTERN.fullmatch(raw) is None:
        raise ValueError(f"{raw!r} is not a valid integer")
    return int(raw)


def parse_float(raw: str) -> float:
    if _FLOAT_PATTERN.fullmatch(raw) is None:
        raise ValueError(f"{raw!r} is not a valid floating point number")
    return float(raw)
