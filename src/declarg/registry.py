# SPDX-FileCopyrightText: AISEC Pentesting Team
#
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Iterator, Mapping

from declarg.errors import ConfigError
from declarg.log import get_logger
from declarg.option import OptionSpec
from declarg.utils import strip_dashes

logger = get_logger(__name__)


class OptionRegistry:
    """Ordered collection of option specs.

    Insertion order is preserved and determines the order of the help text.
    The name lookup maps canonical names and aliases to the index of the
    owning spec; it is rebuilt by `build_lookup()` at the start of every parse.
    """

    def __init__(self) -> None:
        self._specs: list[OptionSpec] = []
        self._lookup: dict[str, int] = {}

    def __iter__(self) -> Iterator[OptionSpec]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = strip_dashes(name)
        return any(key == spec.name or key in spec.aliases for spec in self._specs)

    def __getitem__(self, index: int) -> OptionSpec:
        return self._specs[index]

    @property
    def specs(self) -> tuple[OptionSpec, ...]:
        return tuple(self._specs)

    @property
    def names(self) -> Mapping[str, int]:
        return dict(self._lookup)

    def add_argument(self, name: str) -> OptionSpec:
        spec = OptionSpec(name)
        self._specs.append(spec)
        return spec

    def build_lookup(self) -> dict[str, int]:
        """Maps every canonical name and alias to the index of its spec.

        Canonical names are inserted before aliases, both in insertion order.

        Raises:
            ConfigError: A name or alias is used twice.
        """
        self._lookup.clear()

        for index, spec in enumerate(self._specs):
            self._insert(spec.name, index)
        for index, spec in enumerate(self._specs):
            for alias in spec.aliases:
                self._insert(alias, index)

        logger.trace("built lookup with %d names for %d options", len(self._lookup), len(self))
        return dict(self._lookup)

    def _insert(self, key: str, index: int) -> None:
        if key in self._lookup:
            self._lookup.clear()
            raise ConfigError(f"Duplicate alias: {key}", key)
        self._lookup[key] = index

    def get(self, key: str) -> OptionSpec | None:
        """Returns the spec registered under exactly `key`."""
        index = self._lookup.get(key)
        return self._specs[index] if index is not None else None

    def lookup(self, name: str) -> OptionSpec | None:
        """Returns the spec owning a canonical name or alias, dashes are ignored."""
        return self.get(strip_dashes(name))

    def aliases(self) -> dict[str, str]:
        """Maps every alias to the canonical name of its spec."""
        return {alias: spec.name for spec in self._specs for alias in spec.aliases}
