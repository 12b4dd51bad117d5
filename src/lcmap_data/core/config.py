"""Configuration sources and the deep merge that combines them.

The combined configuration is built, in increasing precedence, from:

1. environment defaults (:func:`load_config`),
2. the database block derived from the parsed flags (:func:`db_block`),
3. the raw parsed options, nested under ``opts``.

Everything here is pure except :class:`OsEnvironment`, which reads the
process environment and is only ever used at the CLI edge.
"""

from __future__ import annotations

import copy
import os
import re
from collections.abc import Mapping

from lcmap_data.core.models import ConfigTree, ConfigValue, ParsedArgs
from lcmap_data.core.protocols import EnvironmentProvider

HOSTS_VAR = "LCMAP_HOSTS"
USER_VAR = "LCMAP_USER"
PASS_VAR = "LCMAP_PASS"
SPEC_KEYSPACE_VAR = "LCMAP_SPEC_KEYSPACE"
SPEC_TABLE_VAR = "LCMAP_SPEC_TABLE"
INGEST_BACKEND_VAR = "LCMAP_INGEST_BACKEND"

_HOST_SEPARATORS = re.compile(r"[,\s]+")


# ---------------------------------------------------------------------------
# Environment providers
# ---------------------------------------------------------------------------

class OsEnvironment:
    """:class:`EnvironmentProvider` backed by :data:`os.environ`."""

    def get(self, name: str, default: str = "") -> str:
        return os.environ.get(name, default)


class MappingEnvironment:
    """:class:`EnvironmentProvider` backed by an explicit mapping."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    def get(self, name: str, default: str = "") -> str:
        return self._values.get(name, default)


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def parse_host_list(raw: str) -> list[str]:
    """Split a comma and/or whitespace separated host list.

    >>> parse_host_list("a, b,c")
    ['a', 'b', 'c']
    >>> parse_host_list("")
    []
    """
    return [host for host in _HOST_SEPARATORS.split(raw) if host]


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------

def load_config(env: EnvironmentProvider) -> ConfigTree:
    """Build the base configuration from environment variables.

    Every key is always present; unset variables become ``""`` (or an
    empty host list) so the merge can rely on the shape.
    """
    return {
        "db": {
            "hosts": parse_host_list(env.get(HOSTS_VAR)),
            "credentials": {
                "username": env.get(USER_VAR),
                "password": env.get(PASS_VAR),
            },
        },
        "spec": {
            "keyspace": env.get(SPEC_KEYSPACE_VAR),
            "table": env.get(SPEC_TABLE_VAR),
        },
        "ingest": {
            "backend": env.get(INGEST_BACKEND_VAR),
        },
    }


def db_block(parsed: ParsedArgs) -> ConfigTree:
    """Return the ``db`` block derived from the parsed flags."""
    options = parsed.options
    return {
        "db": {
            "hosts": list(options.get("hosts") or []),
            "credentials": {
                "username": options.get("username"),
                "password": options.get("password"),
            },
        },
    }


def opts_block(parsed: ParsedArgs) -> ConfigTree:
    """Return every parsed option nested under ``opts``."""
    return {"opts": dict(parsed.options)}


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

def deep_merge(*trees: Mapping[str, ConfigValue]) -> ConfigTree:
    """Merge *trees* left to right into a new tree.

    On a key collision where both values are mappings the two are merged
    recursively; otherwise the later value wins.  Inputs are never
    modified.
    """
    merged: ConfigTree = {}
    for tree in trees:
        for key, value in tree.items():
            current = merged.get(key)
            if isinstance(current, Mapping) and isinstance(value, Mapping):
                merged[key] = deep_merge(current, value)
            elif isinstance(value, Mapping):
                merged[key] = deep_merge(value)
            else:
                merged[key] = copy.deepcopy(value)
    return merged


def merge_config(base: Mapping[str, ConfigValue], parsed: ParsedArgs) -> ConfigTree:
    """Combine environment defaults with the parsed command line."""
    return deep_merge(base, db_block(parsed), opts_block(parsed))


def get_in(tree: Mapping[str, ConfigValue], *path: str, default: ConfigValue = None) -> ConfigValue:
    """Look up a nested key, returning *default* when any step is missing."""
    node: ConfigValue = tree  # type: ignore[assignment]
    for key in path:
        if not isinstance(node, Mapping) or key not in node:
            return default
        node = node[key]
    return node
