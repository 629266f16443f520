# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Declarative Option Specification.

The `option` module contains the `OptionSpec` class, which describes a single
named command-line option. Specs are configured through chained builder
methods while the program sets up its parser, and are read-only during
parsing. A spec also knows how to check (`validate()`) and convert
(`convert()`) a raw string supplied for it.

Example:
    ```python
    registry.add_argument("port").type_int().min_value(1024).default_value(8080).add_alias("p")
    ```
"""

from collections.abc import Callable, Iterable
from typing import Self

from declarg.errors import ConfigError, ValidationError
from declarg.utils import parse_float, parse_int, strip_dashes
from declarg.values import Value, ValueType

DEFAULT_VALIDATION_MESSAGE = "Validation failed."

#: Raw strings recognized as booleans when no type was declared.
AUTO_BOOL_LITERALS = {"true": True, "false": False, "1": True, "0": False}

#: Raw strings converted to `True` for boolean options; anything else is `False`.
TRUE_LITERALS = ("true", "1")


class OptionSpec:
    """Description of a single named option.

    Every configuration method returns the spec itself, so that options can
    be declared in a single chained expression.
    """

    def __init__(self, name: str) -> None:
        self.name = strip_dashes(name)
        if self.name == "":
            raise ConfigError(f"Invalid option name: {name!r}")
        self.aliases: list[str] = []
        self.help_text = ""
        self.is_required = False
        self.is_flag = False
        self.declared_type = ValueType.AUTO
        self.default = Value(ValueType.STRING, "")
        self.min: int | None = None
        self.max: int | None = None
        self.env_var: str | None = None
        self.choice_set: tuple[str, ...] = ()
        self.custom_validator: Callable[[str], bool] | None = None
        self.validation_message = DEFAULT_VALIDATION_MESSAGE

    def __repr__(self) -> str:
        return f"OptionSpec({self.name!r}, type={self.declared_type.value})"

    @property
    def option_string(self) -> str:
        return f"--{self.name}"

    def help(self, text: str) -> Self:  # noqa: A003
        self.help_text = text
        return self

    def required(self, req: bool = True) -> Self:
        self.is_required = req
        return self

    def env(self, name: str) -> Self:
        """Names the environment variable consulted when the option is absent."""
        self.env_var = name
        return self

    def add_alias(self, alias: str) -> Self:
        """Registers an alternate name.

        Collisions with other options are only detected when the registry
        builds its lookup.

        Raises:
            ConfigError: The alias is empty or equal to the canonical name.
        """
        alias = strip_dashes(alias)
        if alias == "" or alias == self.name:
            raise ConfigError(f"Invalid alias for {self.option_string}: {alias!r}", self.name)

        self.aliases.append(alias)
        return self

    def default_value(self, value: int | float | str | bool) -> Self:
        """Sets the default used when neither the command line nor the environment supply a value.

        Raises:
            ConfigError: The value does not match a fixed declared type.
        """
        try:
            default = Value.of(value)
        except TypeError as exc:
            raise ConfigError(
                f"Unsupported default for {self.option_string}: {value!r}", self.name
            ) from exc

        if self.declared_type is not ValueType.AUTO and default.kind is not self.declared_type:
            raise ConfigError(
                f"Default for {self.option_string} must be {self.declared_type.value}, "
                f"got {default.kind.value}",
                self.name,
            )

        self.default = default
        return self

    def _set_type(self, kind: ValueType) -> Self:
        if self.is_flag and kind is not ValueType.BOOL:
            raise ConfigError(f"Flag {self.option_string} must be of type bool", self.name)

        self.declared_type = kind
        # The default always carries the declared kind.
        if self.default.kind is not kind:
            self.default = kind.zero()
        return self

    def type_int(self) -> Self:
        return self._set_type(ValueType.INT)

    def type_float(self) -> Self:
        return self._set_type(ValueType.FLOAT)

    def type_string(self) -> Self:
        return self._set_type(ValueType.STRING)

    def type_bool(self) -> Self:
        return self._set_type(ValueType.BOOL)

    def flag(self, set_: bool = True) -> Self:
        """Turns the option into a flag, which is `True` when present."""
        self.is_flag = set_
        if set_:
            self.declared_type = ValueType.BOOL
            self.default = Value(ValueType.BOOL, False)
        return self

    def min_value(self, value: int) -> Self:
        self.min = value
        return self

    def max_value(self, value: int) -> Self:
        self.max = value
        return self

    def choices(self, values: Iterable[str]) -> Self:
        self.choice_set = tuple(dict.fromkeys(values))
        return self

    def custom_validation(
        self,
        predicate: Callable[[str], bool],
        message: str | None = None,
    ) -> Self:
        """Adds a check on the raw string, run after all built-in checks."""
        self.custom_validator = predicate
        self.validation_message = message if message else DEFAULT_VALIDATION_MESSAGE
        return self

    def validate(self, raw: str) -> None:
        """Checks a raw string against the constraints of this option.

        Integer options are checked for syntax and range, all other options
        against the choice set. The custom validator always runs last.

        Args:
            raw (str): The value as supplied on the command line or in the
                environment.

        Raises:
            ValidationError: The raw string violates a constraint.
        """
        if self.declared_type is ValueType.INT:
            value = self._parse_int(raw)

            if (self.min is not None and value < self.min) or (
                self.max is not None and value > self.max
            ):
                lower = self.min if self.min is not None else "-inf"
                upper = self.max if self.max is not None else "inf"
                raise ValidationError(
                    f"Value {value} for {self.option_string} out of range [{lower}, {upper}]",
                    self.name,
                )
        elif len(self.choice_set) > 0 and raw not in self.choice_set:
            raise ValidationError(
                f"Invalid choice for {self.option_string}: {raw!r} "
                f"(choose from {', '.join(self.choice_set)})",
                self.name,
            )

        if self.custom_validator is not None:
            try:
                ok = self.custom_validator(raw)
            except (ValueError, TypeError) as exc:
                raise ValidationError(self.validation_message, self.name) from exc
            if not ok:
                raise ValidationError(self.validation_message, self.name)

    def convert(self, raw: str) -> Value:
        """Converts a validated raw string into a tagged value of the declared type."""
        match self.declared_type:
            case ValueType.INT:
                return Value(ValueType.INT, self._parse_int(raw))
            case ValueType.FLOAT:
                try:
                    return Value(ValueType.FLOAT, parse_float(raw))
                except ValueError:
                    raise ValidationError(
                        f"Invalid float value for {self.option_string}: {raw!r}", self.name
                    ) from None
            case ValueType.BOOL:
                return Value(ValueType.BOOL, raw in TRUE_LITERALS)
            case ValueType.STRING:
                return Value(ValueType.STRING, raw)
            case ValueType.AUTO:
                return infer_value(raw)

    def _parse_int(self, raw: str) -> int:
        try:
            return parse_int(raw)
        except ValueError:
            raise ValidationError(
                f"Invalid integer value for {self.option_string}: {raw!r}", self.name
            ) from None


def infer_value(raw: str) -> Value:
    """Guesses the kind of an untyped raw string.

    The first parse consuming the whole string wins, in the order bool
    literal, integer, float, and finally the literal string.
    """
    if raw in AUTO_BOOL_LITERALS:
        return Value(ValueType.BOOL, AUTO_BOOL_LITERALS[raw])

    try:
        return Value(ValueType.INT, parse_int(raw))
    except ValueError:
        pass

    try:
        return Value(ValueType.FLOAT, parse_float(raw))
    except ValueError:
        pass

    return Value(ValueType.STRING, raw)
