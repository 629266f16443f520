# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Declarative and Typed Argument Parser.

The `parser` module contains the `ArgumentParser` class, which provides a
declarative method of defining command-line interfaces.

The procedure to declaratively define a typed command-line interface is:

1. Create an `ArgumentParser`
2. Register options with `add_argument()` and configure them by chaining
3. Parse the argument vector with `parse_args()`

The result is either a `ValueTable` or an `EarlyExit` outcome, which asks the
caller to print a text (help page or version) and terminate. The parser never
exits the process itself; `parse_args_or_exit()` does so on behalf of simple
programs.
"""

import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, NoReturn

import exitcode
from pydantic import BaseModel

from declarg.config import ParserSettings
from declarg.errors import ArgumentError
from declarg.help import format_help
from declarg.log import get_logger
from declarg.model import PydanticModelT, registry_from_model
from declarg.option import OptionSpec
from declarg.registry import OptionRegistry
from declarg.resolver import Getenv, resolve
from declarg.tokenizer import candidate_name, tokenize
from declarg.values import ValueTable

logger = get_logger(__name__)


@dataclass(frozen=True)
class EarlyExit:
    """Outcome of a parse which asks the caller to print `text` and exit."""

    text: str
    exit_code: int = exitcode.OK


@dataclass(frozen=True)
class HelpRequested(EarlyExit):
    pass


@dataclass(frozen=True)
class VersionRequested(EarlyExit):
    pass


class ArgumentParser:
    """Declarative and Typed Argument Parser.

    The `ArgumentParser` owns an `OptionRegistry`. All options are *named*;
    bare tokens are only meaningful as the value of a preceding option.
    """

    HELP = "help"
    HELP_SHORT = "h"
    VERSION = "version"
    VERSION_SHORT = "V"

    # Exit Codes
    EXIT_ERROR = exitcode.USAGE

    def __init__(
        self,
        prog: str | None = None,
        description: str | None = None,
        epilog: str | None = None,
        version: str | None = None,
        auto_help: bool | None = None,
        add_help: bool | None = None,
        getenv: Getenv | None = None,
        settings: ParserSettings | None = None,
    ) -> None:
        """Instantiates the typed Argument Parser.

        Args:
            prog (str | None): Program name for the usage line. Defaults to
                the basename of `sys.argv[0]`.
            description (str | None): Program description for the help page.
            epilog (str | None): Optional text following the help page.
            version (str | None): Program version; enables `--version`/`-V`.
            auto_help (bool | None): Whether an empty argument vector yields
                the help page. Overrides `settings`.
            add_help (bool | None): Whether `--help`/`-h` are recognized.
                Overrides `settings`.
            getenv (Getenv | None): Environment lookup used for option
                fallbacks. Defaults to `os.getenv`.
            settings (ParserSettings | None): Defaults for `auto_help` and
                `add_help`. Read from ``DECLARG_*`` variables if omitted.
        """
        self.getenv: Getenv = getenv if getenv is not None else os.getenv
        self.settings = settings if settings is not None else ParserSettings.from_env(self.getenv)

        self.prog = prog if prog is not None else os.path.basename(sys.argv[0])
        self.description = description
        self.epilog = epilog
        self.version = version
        self.auto_help = auto_help if auto_help is not None else self.settings.auto_help
        self.add_help = add_help if add_help is not None else self.settings.add_help

        self.registry = OptionRegistry()
        self.model: type[BaseModel] | None = None

    @classmethod
    def from_model(
        cls,
        model: type[BaseModel],
        prog: str | None = None,
        **kwargs: Any,
    ) -> "ArgumentParser":
        """Creates a parser with one option per field of a `pydantic` model.

        The description defaults to the model docstring.
        """
        kwargs.setdefault("description", model.__doc__)
        parser = cls(prog, **kwargs)
        parser.model = model
        registry_from_model(model, parser.registry)
        return parser

    def add_argument(self, name: str) -> OptionSpec:
        return self.registry.add_argument(name)

    def format_help(self) -> str:
        builtins = []
        if self.add_help and (invocation := self._builtin_invocation(self.HELP, self.HELP_SHORT)):
            builtins.append((invocation, "show this help message and exit"))
        if self.version is not None and (
            invocation := self._builtin_invocation(self.VERSION, self.VERSION_SHORT)
        ):
            builtins.append((invocation, "show program's version number and exit"))

        return format_help(
            self.prog,
            self.registry,
            description=self.description,
            epilog=self.epilog,
            extra=builtins,
        )

    def format_version(self) -> str:
        return f"{self.prog} {self.version}\n"

    def _is_builtin(self, name: str) -> bool:
        # User options shadow the built-in help and version flags.
        return name not in self.registry

    def _builtin_invocation(self, long: str, short: str) -> str:
        names = []
        if self._is_builtin(long):
            names.append(f"--{long}")
        if self._is_builtin(short):
            names.append(f"-{short}")
        return ", ".join(names)

    def _requests(self, argv: Sequence[str], long: str, short: str) -> bool:
        names = {n for n in (long, short) if self._is_builtin(n)}
        return any(candidate_name(token) in names for token in argv[1:])

    def parse_args(self, argv: Sequence[str] | None = None) -> ValueTable | EarlyExit:
        """Parses command line arguments.

        If `argv` is not supplied, `sys.argv` is used. Element 0 is the
        program invocation and is skipped.

        Args:
            argv (Sequence[str] | None): Argument vector to parse.

        Returns:
            ValueTable | EarlyExit: The typed values, or `HelpRequested` /
                `VersionRequested` if the caller should print a text and exit.

        Raises:
            ConfigError: The registry contains duplicate names or aliases.
            ParseError: The arguments are malformed or incomplete.
            ValidationError: A value violates the constraints of its option.
        """
        if argv is None:
            argv = sys.argv

        self.registry.build_lookup()

        if self.add_help and self._requests(argv, self.HELP, self.HELP_SHORT):
            logger.debug("help requested")
            return HelpRequested(self.format_help())
        if self.auto_help and len(argv) <= 1:
            logger.debug("no arguments given, showing help")
            return HelpRequested(self.format_help())
        if self.version is not None and self._requests(argv, self.VERSION, self.VERSION_SHORT):
            return VersionRequested(self.format_version())

        provided = tokenize(argv, self.registry)
        logger.debug("command line provided %s", ", ".join(provided) or "no options")

        return resolve(self.registry, provided, self.getenv)

    def parse_typed_args(
        self,
        argv: Sequence[str] | None = None,
        model: type[PydanticModelT] | None = None,
    ) -> PydanticModelT | BaseModel | EarlyExit:
        """Parses command line arguments into an instance of a `pydantic` model.

        Args:
            argv (Sequence[str] | None): Argument vector to parse.
            model (type[BaseModel] | None): Target model. Defaults to the
                model the parser was created from with `from_model()`.

        Raises:
            ValidationError: Also raised if the model rejects the values.
        """
        if model is None:
            if self.model is None:
                raise TypeError("parse_typed_args() needs a model")
            model = self.model  # type: ignore[assignment]

        result = self.parse_args(argv)
        if isinstance(result, EarlyExit):
            return result

        # Options derived from the model leave their defaults to the model.
        return result.to_model(model, exclude_defaults=model is self.model)

    def parse_args_or_exit(self, argv: Sequence[str] | None = None) -> ValueTable:
        """Parses command line arguments, terminating the process on help or errors.

        This is meant for the outermost caller of a program only.
        """
        try:
            result = self.parse_args(argv)
        except ArgumentError as exc:
            self.error(exc.message)

        if isinstance(result, EarlyExit):
            sys.stdout.write(result.text)
            sys.exit(result.exit_code)

        return result

    def error(self, message: str) -> NoReturn:
        """Prints a usage message to `stderr` and exits."""
        sys.stderr.write(f"Usage: {self.prog} [OPTIONS]\n")
        sys.stderr.write(f"error: {message}\n")
        sys.exit(self.EXIT_ERROR)
