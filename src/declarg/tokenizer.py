# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Splits a raw argument vector into option names and raw values.

Tokens starting with ``--`` or ``-`` introduce an option. The token following
an option is taken as its value unless it starts with ``-`` itself, so values
such as negative numbers cannot be passed with a separate token. Bare tokens
which are not consumed as a value are ignored.
"""

from collections.abc import Sequence

from declarg.errors import ParseError
from declarg.log import get_logger
from declarg.registry import OptionRegistry

logger = get_logger(__name__)

#: Recorded for a flag given without a value.
FLAG_PRESENT = ""


def candidate_name(token: str) -> str | None:
    if token.startswith("--"):
        return token[2:]
    if token.startswith("-"):
        return token[1:]
    return None


def tokenize(argv: Sequence[str], registry: OptionRegistry) -> dict[str, str]:
    """Collects the raw values supplied on the command line.

    Args:
        argv (Sequence[str]): Argument vector; element 0 is the program name
            and is skipped.
        registry (OptionRegistry): Registry whose lookup has been built.

    Returns:
        dict[str, str]: Canonical option name to raw value. Flags given
            without a value map to `FLAG_PRESENT`. The last occurrence of an
            option wins.

    Raises:
        ParseError: An unknown option or an option lacking its value.
    """
    provided: dict[str, str] = {}
    i = 1

    while i < len(argv):
        token = argv[i]
        name = candidate_name(token)

        if name is None:
            logger.debug("ignoring bare token %r", token)
            i += 1
            continue

        spec = registry.get(name)
        if spec is None:
            raise ParseError(f"Unrecognized argument: {token}", name)

        if i + 1 < len(argv) and not argv[i + 1].startswith("-"):
            value = argv[i + 1]
            i += 2
        elif spec.is_flag:
            value = FLAG_PRESENT
            i += 1
        else:
            raise ParseError(f"Missing value for {token}", spec.name)

        if spec.name in provided:
            logger.notice("%s given more than once, last value wins", spec.option_string)

        provided[spec.name] = value

    return provided
