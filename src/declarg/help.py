# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

"""Help text generation.

One line is generated per registered option, in registration order. The line
lists the option strings, the description and, in parentheses, the default,
the choices, the environment variable and whether the option is required.
"""

from collections.abc import Iterable

from declarg.option import OptionSpec
from declarg.values import ValueType

INDENT = "  "
HELP_COLUMN = 24


def option_strings(spec: OptionSpec) -> list[str]:
    names = [spec.option_string]
    for alias in spec.aliases:
        names.append(f"-{alias}" if len(alias) == 1 else f"--{alias}")
    return names


def metavar(spec: OptionSpec) -> str | None:
    if spec.is_flag:
        return None
    if len(spec.choice_set) > 0 and spec.declared_type is not ValueType.INT:
        return f"{{{','.join(spec.choice_set)}}}"
    if spec.declared_type is ValueType.AUTO:
        return "VALUE"
    return spec.declared_type.value.upper()


def option_description(spec: OptionSpec) -> str:
    details = []

    if spec.is_required:
        details.append("required")
    else:
        details.append(f"default: {spec.default.render()}")
    if len(spec.choice_set) > 0:
        details.append(f"choices: {', '.join(spec.choice_set)}")
    if spec.min is not None or spec.max is not None:
        lower = spec.min if spec.min is not None else ""
        upper = spec.max if spec.max is not None else ""
        details.append(f"range: {lower}..{upper}")
    if spec.env_var is not None:
        details.append(f"env: {spec.env_var}")

    text = spec.help_text
    if len(details) > 0:
        text = f"{text} ({'; '.join(details)})" if text else f"({'; '.join(details)})"
    return text


def format_option(spec: OptionSpec) -> str:
    invocation = ", ".join(option_strings(spec))
    if (mv := metavar(spec)) is not None:
        invocation += f" {mv}"

    line = f"{INDENT}{invocation}"
    if len(line) >= HELP_COLUMN:
        return f"{line}\n{' ' * HELP_COLUMN}{option_description(spec)}"
    return f"{line.ljust(HELP_COLUMN)}{option_description(spec)}"


def format_help(
    prog: str,
    specs: Iterable[OptionSpec],
    description: str | None = None,
    epilog: str | None = None,
    extra: Iterable[tuple[str, str]] = (),
) -> str:
    """Formats the help page for a set of options.

    Args:
        prog (str): Program name shown in the usage line.
        specs (Iterable[OptionSpec]): Registered options, in display order.
        description (str | None): Text shown below the usage line.
        epilog (str | None): Text shown after the option list.
        extra (Iterable[tuple[str, str]]): Additional ``(invocation, help)``
            lines, such as the built-in help and version flags.

    Returns:
        str: The help page, ending with a newline.
    """
    sections = [f"Usage: {prog} [OPTIONS]"]

    if description:
        sections.append(description)

    lines = ["Options:"]
    lines.extend(format_option(spec) for spec in specs)
    for invocation, text in extra:
        lines.append(f"{INDENT}{invocation}".ljust(HELP_COLUMN) + text)
    sections.append("\n".join(lines))

    if epilog:
        sections.append(epilog)

    return "\n\n".join(sections) + "\n"
