# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import pydantic
import pytest

from declarg.config import ParserSettings
from declarg.log import ColorMode, Loglevel


def test_defaults() -> None:
    settings = ParserSettings.from_env({}.get)
    assert settings.auto_help
    assert settings.add_help
    assert settings.log_level is None
    assert settings.color_mode is ColorMode.AUTO


def test_attributes_from_env() -> None:
    env = {
        "DECLARG_AUTO_HELP": "false",
        "DECLARG_LOGLEVEL": "debug",
        "DECLARG_COLOR": "never",
        "UNRELATED": "1",
    }
    assert ParserSettings.attributes_from_env(env.get) == {
        "auto_help": "false",
        "log_level": "debug",
        "color_mode": "never",
    }


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("trace", Loglevel.TRACE),
        ("DEBUG", Loglevel.DEBUG),
        ("notice", Loglevel.NOTICE),
        ("7", Loglevel.DEBUG),
        ("8", Loglevel.TRACE),
        ("0", Loglevel.CRITICAL),
    ],
)
def test_loglevel_from_env(raw: str, expected: Loglevel) -> None:
    settings = ParserSettings.from_env({"DECLARG_LOGLEVEL": raw}.get)
    assert settings.log_level is expected


@pytest.mark.parametrize("raw", ["ALWAYS", "auto", "Never"])
def test_color_mode_from_env(raw: str) -> None:
    settings = ParserSettings.from_env({"DECLARG_COLOR": raw}.get)
    assert settings.color_mode is ColorMode(raw.lower())


@pytest.mark.parametrize(
    "env",
    [
        {"DECLARG_AUTO_HELP": "maybe"},
        {"DECLARG_LOGLEVEL": "loud"},
        {"DECLARG_LOGLEVEL": "9"},
        {"DECLARG_COLOR": "sometimes"},
    ],
)
def test_invalid_values(env: dict[str, str]) -> None:
    with pytest.raises(pydantic.ValidationError):
        ParserSettings.from_env(env.get)


def test_settings_are_frozen() -> None:
    settings = ParserSettings()
    with pytest.raises(pydantic.ValidationError):
        settings.auto_help = False  # type: ignore[misc]


def test_unknown_fields_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        ParserSettings(verbose=True)  # type: ignore[call-arg]


def test_from_real_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DECLARG_ADD_HELP", "0")
    assert not ParserSettings.from_env().add_help
