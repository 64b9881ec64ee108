import importlib
import pkgutil
from importlib.metadata import entry_points
from typing import Any

import click

from .errors import ErrorCode
from .registry import DEFAULT_NO_SUCH_METHOD_MESSAGE, Registry, build_registry

ENTRY_POINT_GROUP = "iskra_cli.plugins"


def registry_from(
    source: Any, *, no_such_method_message: str = DEFAULT_NO_SUCH_METHOD_MESSAGE
) -> Registry:
    """Build a registry from an object exposing ``COMMANDS`` and optionally ``OWNER``."""

    specs = getattr(source, "COMMANDS", None)
    if specs is None:
        return Registry()
    return build_registry(
        specs, getattr(source, "OWNER", None), no_such_method_message=no_such_method_message
    )


def _warn(name: str, e: Exception) -> None:
    click.echo(
        f"Warning: plugin import failed ({ErrorCode.E_PLUGIN_IMPORT.name}): {name} ({e!r})",
        err=True,
    )


def load_plugins(
    package: str, *, no_such_method_message: str = DEFAULT_NO_SUCH_METHOD_MESSAGE
) -> Registry:
    """Import all modules in a package and collect the commands they declare.

    Modules are visited in name order, which fixes match priority. Import
    errors, and modules whose command list cannot be read, are reported but
    do not abort the CLI.
    """

    registry = Registry()
    pkg = importlib.import_module(package)
    for m in sorted(pkgutil.iter_modules(pkg.__path__, prefix=f"{package}."), key=lambda x: x.name):
        if m.ispkg:
            continue
        try:
            module = importlib.import_module(m.name)
            found = registry_from(module, no_such_method_message=no_such_method_message)
        except Exception as e:
            _warn(m.name, e)
            continue
        registry = registry.extend(found)
    return registry


def load_entry_point_plugins(
    group: str = ENTRY_POINT_GROUP, *, no_such_method_message: str = DEFAULT_NO_SUCH_METHOD_MESSAGE
) -> Registry:
    """Collect commands advertised by installed distributions."""

    registry = Registry()
    for ep in sorted(entry_points(group=group), key=lambda x: x.name):
        try:
            found = registry_from(ep.load(), no_such_method_message=no_such_method_message)
        except Exception as e:
            _warn(ep.name, e)
            continue
        registry = registry.extend(found)
    return registry
