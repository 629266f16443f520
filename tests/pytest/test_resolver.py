# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import logging

import pytest

from declarg.errors import ParseError, ValidationError
from declarg.log import Loglevel
from declarg.registry import OptionRegistry
from declarg.resolver import resolve
from declarg.tokenizer import FLAG_PRESENT
from declarg.values import Source, Value, ValueType


def no_env(name: str) -> str | None:
    return None


@pytest.fixture
def registry() -> OptionRegistry:
    registry = OptionRegistry()
    registry.add_argument("color").type_string().choices(["RED", "GREEN"]).default_value("RED")
    registry.add_argument("count").type_int().min_value(1).max_value(10).default_value(1)
    registry.add_argument("debug").flag().add_alias("d")
    registry.add_argument("key").type_string().env("API_KEY")
    registry.build_lookup()
    return registry


def test_defaults(registry: OptionRegistry) -> None:
    table = resolve(registry, {}, no_env)
    assert table.value("color") == Value(ValueType.STRING, "RED")
    assert table.value("count") == Value(ValueType.INT, 1)
    assert table.value("debug") == Value(ValueType.BOOL, False)
    assert table.value("key") == Value(ValueType.STRING, "")
    assert all(table.source(name) is Source.DEFAULT for name in table)


def test_one_entry_per_option(registry: OptionRegistry) -> None:
    table = resolve(registry, {"count": "3"}, no_env)
    assert list(table) == ["color", "count", "debug", "key"]


def test_command_line(registry: OptionRegistry) -> None:
    table = resolve(registry, {"color": "GREEN", "count": "7", "debug": FLAG_PRESENT}, no_env)
    assert table.get_as("color", str) == "GREEN"
    assert table.get_as("count", int) == 7
    assert table.get_as("debug", bool) is True
    assert table.source("count") is Source.COMMAND_LINE


@pytest.mark.parametrize("raw,expected", [("true", True), ("1", True), ("false", False)])
def test_flag_with_value(registry: OptionRegistry, raw: str, expected: bool) -> None:
    table = resolve(registry, {"debug": raw}, no_env)
    assert table.get_as("d", bool) is expected


def test_environment_fallback(registry: OptionRegistry) -> None:
    env = {"API_KEY": "secret"}
    table = resolve(registry, {}, env.get)
    assert table.get_as("key", str) == "secret"
    assert table.source("key") is Source.ENVIRONMENT


def test_command_line_beats_environment(registry: OptionRegistry) -> None:
    env = {"API_KEY": "secret"}
    table = resolve(registry, {"key": "explicit"}, env.get)
    assert table.get_as("key", str) == "explicit"
    assert table.source("key") is Source.COMMAND_LINE


def test_empty_environment_variable_counts_as_set(registry: OptionRegistry) -> None:
    env = {"API_KEY": ""}
    table = resolve(registry, {}, env.get)
    assert table.source("key") is Source.ENVIRONMENT


def test_environment_is_validated() -> None:
    registry = OptionRegistry()
    registry.add_argument("count").type_int().max_value(10).env("COUNT")
    registry.build_lookup()

    env = {"COUNT": "50"}
    with pytest.raises(ValidationError) as exc:
        resolve(registry, {}, env.get)
    assert "out of range" in str(exc.value)
    assert str(exc.value).endswith("(from environment variable COUNT)")
    assert exc.value.option == "count"


def test_required_missing() -> None:
    registry = OptionRegistry()
    registry.add_argument("count").type_int().required()
    registry.build_lookup()

    with pytest.raises(ParseError) as exc:
        resolve(registry, {}, no_env)
    assert str(exc.value) == "Missing required argument: --count"
    assert not isinstance(exc.value, ValidationError)


def test_required_satisfied_by_environment() -> None:
    registry = OptionRegistry()
    registry.add_argument("count").type_int().required().env("COUNT")
    registry.build_lookup()

    env = {"COUNT": "4"}
    assert resolve(registry, {}, env.get).get_as("count", int) == 4


def test_command_line_is_validated(registry: OptionRegistry) -> None:
    with pytest.raises(ValidationError, match="out of range"):
        resolve(registry, {"count": "11"}, no_env)
    with pytest.raises(ValidationError, match="Invalid choice"):
        resolve(registry, {"color": "BLUE"}, no_env)


def test_auto_typed_values_are_inferred() -> None:
    registry = OptionRegistry()
    registry.add_argument("value")
    registry.build_lookup()

    assert resolve(registry, {"value": "12"}, no_env).value("value") == Value(ValueType.INT, 12)
    assert resolve(registry, {"value": "0.5"}, no_env).value("value") == Value(
        ValueType.FLOAT, 0.5
    )
    assert resolve(registry, {"value": "abc"}, no_env).value("value") == Value(
        ValueType.STRING, "abc"
    )


def test_environment_lookups_are_traced(
    registry: OptionRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(Loglevel.TRACE, logger="declarg")

    resolve(registry, {}, no_env)
    assert "--key: environment variable API_KEY not set" in caplog.messages

    caplog.clear()
    resolve(registry, {}, {"API_KEY": "x"}.get)
    assert "--key: environment variable API_KEY found" in caplog.messages
    assert all(r.levelno == Loglevel.TRACE for r in caplog.records if "API_KEY" in r.message)


def test_environment_value_is_not_logged(
    registry: OptionRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.NOTSET + 1, logger="declarg")
    resolve(registry, {}, {"API_KEY": "secret"}.get)
    assert not any("secret" in message for message in caplog.messages)
