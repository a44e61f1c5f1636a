"""Stable YAML rendering of structured values for line diffs."""

from __future__ import annotations

from typing import Any, TextIO

import yaml

from driftpack.core.canonical import canonicalize
from driftpack.core.exceptions import SerializationError, StagingIOError

# Effectively disables PyYAML line folding so long values stay on one line.
_NO_WRAP_WIDTH = 2**31 - 1


class _ManifestDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    # Literal blocks cannot carry carriage returns; those stay double-quoted.
    if "\n" in data and "\r" not in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_ManifestDumper.add_representer(str, _represent_str)


class Printer:
    """Render structured values as deterministic block YAML."""

    def render(self, value: Any) -> str:
        canonical = canonicalize(value)
        try:
            return yaml.dump(
                canonical,
                Dumper=_ManifestDumper,
                default_flow_style=False,
                sort_keys=True,
                allow_unicode=True,
                width=_NO_WRAP_WIDTH,
            )
        except yaml.YAMLError as error:
            raise SerializationError(f"cannot render value as YAML: {error}") from error

    def print(self, value: Any, out: TextIO) -> None:
        rendered = self.render(value)
        try:
            out.write(rendered)
        except OSError as error:
            raise StagingIOError(f"cannot write rendered value: {error}") from error

