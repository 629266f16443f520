# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Exceptions raised while building a registry or parsing arguments.

`ConfigError` signals a structural mistake made by the program author, such as
a duplicate alias. `ParseError` and its subclass `ValidationError` signal bad
user input and carry a message naming the offending option or token.
"""


class ArgumentError(Exception):
    def __init__(self, message: str, option: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.option = option

    def __str__(self) -> str:
        return self.message


class ConfigError(ArgumentError):
    pass


class ParseError(ArgumentError):
    pass


class ValidationError(ParseError):
    pass
