# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

import sys
from collections.abc import Sequence
from importlib.metadata import PackageNotFoundError, version

import exitcode
import pydantic

from declarg.config import ParserSettings
from declarg.errors import ArgumentError
from declarg.log import Loglevel, get_logger, setup_logging
from declarg.parser import ArgumentParser, EarlyExit

logger = get_logger("declarg.demo")


def _version() -> str:
    try:
        return version("declarg")
    except PackageNotFoundError:
        return "unknown"


def build_parser(settings: ParserSettings | None = None) -> ArgumentParser:
    parser = ArgumentParser(
        "declarg-demo",
        description="Greets the world a given number of times.",
        epilog="Environment: API_KEY is used when --key is not given.",
        version=_version(),
        settings=settings,
    )

    (
        parser.add_argument("color")
        .type_string()
        .help("Color to use")
        .choices(["RED", "GREEN", "BLUE"])
        .default_value("RED")
        .add_alias("c")
    )
    (
        parser.add_argument("count")
        .type_int()
        .help("Number of times to repeat")
        .required()
        .min_value(1)
        .max_value(10)
    )
    parser.add_argument("debug").help("Enable debug mode").flag().add_alias("d")
    parser.add_argument("key").type_string().help("API key").env("API_KEY")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    try:
        settings = ParserSettings.from_env()
    except pydantic.ValidationError as e:
        print(f"invalid settings: {e}", file=sys.stderr)
        sys.exit(exitcode.CONFIG)

    parser = build_parser(settings)

    try:
        args = parser.parse_args(argv)
    except ArgumentError as e:
        parser.error(e.message)

    if isinstance(args, EarlyExit):
        print(args.text, end="")
        sys.exit(args.exit_code)

    color = args.get_as("color", str)
    count = args.get_as("count", int)
    debug = args.get_as("debug", bool)

    # The level depends on --debug, so logging is set up after parsing.
    level = settings.log_level if settings.log_level is not None else Loglevel.WARNING
    if debug:
        level = min(level, Loglevel.DEBUG)
    setup_logging(level=level, color_mode=settings.color_mode)

    if debug:
        logger.debug("values: %s", args.to_dict())

    print(f"Color: {color}")
    print(f"Count: {count}")
    print(f"Key: {'set' if args.get_as('key', str) else 'unset'} ({args.source('key').value})")

    for _ in range(count):
        print(f"Hello in {color}!")

    sys.exit(exitcode.OK)


if __name__ == "__main__":
    main()
