# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Declarative Typed Command-Line Option Parsing.

This is the `declarg` package. Options are registered with chained builder
calls (or derived from a `pydantic` model) and the parser turns an argument
vector into an immutable, typed `ValueTable`, falling back to environment
variables and declared defaults.
"""

from declarg.config import ParserSettings
from declarg.errors import ArgumentError, ConfigError, ParseError, ValidationError
from declarg.model import Field, registry_from_model
from declarg.option import OptionSpec
from declarg.parser import ArgumentParser, EarlyExit, HelpRequested, VersionRequested
from declarg.registry import OptionRegistry
from declarg.values import Source, Value, ValueTable, ValueType

# Public Re-Exports
__all__ = (
    "ArgumentError",
    "ArgumentParser",
    "ConfigError",
    "EarlyExit",
    "Field",
    "HelpRequested",
    "OptionRegistry",
    "OptionSpec",
    "ParseError",
    "ParserSettings",
    "Source",
    "ValidationError",
    "Value",
    "ValueTable",
    "ValueType",
    "VersionRequested",
    "registry_from_model",
)
