from ..core.registry import CommandSpec


def echo(params: list[str], flags: frozenset[str] | None, args: dict[str, str]) -> str:
    """Print the parameters back, then any key=value arguments."""

    parts = list(params)
    parts.extend(f"{k}={v}" for k, v in sorted(args.items()))
    return " ".join(parts)


def count(params: list[str], flags: frozenset[str] | None, args: dict[str, str]) -> str:
    """Count the parameters given."""
    return str(len(params))


COMMANDS = [
    CommandSpec("echo", echo),
    CommandSpec("count", count, aliases=frozenset({"n"})),
]
