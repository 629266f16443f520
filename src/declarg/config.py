# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import os
from collections.abc import Callable
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from declarg.log import ColorMode, Loglevel

ENV_PREFIX = "DECLARG_"


def _parse_loglevel(value: Any) -> Any:
    if isinstance(value, str):
        return Loglevel.from_str(value)
    return value


def _parse_color_mode(value: Any) -> Any:
    if isinstance(value, str):
        return ColorMode(value.lower())
    return value


class ParserSettings(BaseModel):
    """Settings of an `ArgumentParser` which may be overridden by the environment."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    auto_help: bool = Field(
        True, description="Show the help page when no arguments are supplied at all"
    )
    add_help: bool = Field(True, description="Recognize -h/--help anywhere on the command line")
    log_level: Annotated[Loglevel | None, BeforeValidator(_parse_loglevel)] = Field(
        None, description="Level for setup_logging(); WARNING if unset"
    )
    color_mode: Annotated[ColorMode, BeforeValidator(_parse_color_mode)] = Field(
        ColorMode.AUTO, description="Colors of the console log"
    )

    @classmethod
    def attributes_from_env(
        cls, getenv: Callable[[str], str | None] = os.getenv
    ) -> dict[str, str]:
        result = {}

        for name in cls.model_fields:
            env_name = f"{ENV_PREFIX}{name.upper()}"
            if name == "log_level":
                env_name = f"{ENV_PREFIX}LOGLEVEL"
            elif name == "color_mode":
                env_name = f"{ENV_PREFIX}COLOR"

            if (value := getenv(env_name)) is not None:
                result[name] = value

        return result

    @classmethod
    def from_env(cls, getenv: Callable[[str], str | None] = os.getenv) -> "ParserSettings":
        """Builds the settings from ``DECLARG_*`` environment variables.

        :param getenv: Environment lookup, returning None for unset variables.
        :raises pydantic.ValidationError: A variable holds an invalid value.
        """
        return cls.model_validate(cls.attributes_from_env(getenv))
