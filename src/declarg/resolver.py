# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Merges command-line values, environment fallbacks and defaults.

For every registered option the value supplied on the command line takes
precedence over the environment variable named by the option, which in turn
takes precedence over the declared default. Defaults are used as declared;
values from the other two sources are validated and converted.
"""

import os
from collections.abc import Callable, Mapping

from declarg.errors import ParseError, ValidationError
from declarg.log import get_logger
from declarg.registry import OptionRegistry
from declarg.tokenizer import FLAG_PRESENT
from declarg.values import Source, Value, ValueTable, ValueType

logger = get_logger(__name__)

Getenv = Callable[[str], str | None]


def resolve(
    registry: OptionRegistry,
    provided: Mapping[str, str],
    getenv: Getenv = os.getenv,
) -> ValueTable:
    """Resolves the final value of every registered option.

    Args:
        registry (OptionRegistry): Registry holding the option specs.
        provided (Mapping[str, str]): Raw values from the command line, as
            returned by `tokenize()`.
        getenv (Getenv): Environment lookup, returning `None` for unset
            variables.

    Returns:
        ValueTable: Exactly one entry per registered option.

    Raises:
        ParseError: A required option has no value.
        ValidationError: A supplied value violates the option's constraints.
    """
    values: dict[str, Value] = {}
    sources: dict[str, Source] = {}

    for spec in registry:
        if spec.name in provided:
            raw = provided[spec.name]
            sources[spec.name] = Source.COMMAND_LINE

            if spec.is_flag and raw == FLAG_PRESENT:
                values[spec.name] = Value(ValueType.BOOL, True)
                continue

            spec.validate(raw)
            values[spec.name] = spec.convert(raw)
            continue

        if spec.env_var is not None:
            raw_env = getenv(spec.env_var)

            if raw_env is not None:
                logger.trace("%s: environment variable %s found", spec.option_string, spec.env_var)
                sources[spec.name] = Source.ENVIRONMENT
                try:
                    spec.validate(raw_env)
                    values[spec.name] = spec.convert(raw_env)
                except ValidationError as exc:
                    raise ValidationError(
                        f"{exc.message} (from environment variable {spec.env_var})", spec.name
                    ) from exc
                continue

            logger.trace("%s: environment variable %s not set", spec.option_string, spec.env_var)

        if spec.is_required:
            raise ParseError(f"Missing required argument: {spec.option_string}", spec.name)

        values[spec.name] = spec.default

    return ValueTable(values, registry.aliases(), sources)
