import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from .errors import ErrorCode, RegistrationError
from .parser import ParsedInput

logger = logging.getLogger(__name__)

DEFAULT_NO_SUCH_METHOD_MESSAGE = "Internal exception: no such method"

Handler = Callable[[Sequence[str], frozenset[str] | None, Mapping[str, str]], str]


@dataclass(frozen=True)
class CommandSpec:
    """Declarative record a host supplies for one command.

    Args:
        name: Command token the command answers to.
        handler: The callable itself, or the name of a method on the owner
            instance passed to :func:`build_registry`.
        required_params: Number of positional parameters the command expects.
        required_args: ``--key=value`` keys the command expects.
        required_flags: ``--flag`` switches the command expects.
        aliases: Short forms of the name.
        summary: One-line help text (defaults to the first docstring line).
    """

    name: str
    handler: Handler | str
    required_params: int = 0
    required_args: frozenset[str] = frozenset()
    required_flags: frozenset[str] = frozenset()
    aliases: frozenset[str] = frozenset()
    summary: str | None = None


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    handler: Handler = field(compare=False)
    required_params: int = 0
    required_args: frozenset[str] = frozenset()
    required_flags: frozenset[str] = frozenset()
    aliases: frozenset[str] = frozenset()
    summary: str = "Run command"

    def responds_to(self, token: str, *, aliases: bool = False) -> bool:
        if token == self.name:
            return True
        return aliases and token in self.aliases

    def missing(self, parsed: ParsedInput) -> list[str]:
        """Describe how ``parsed`` falls short of this command's shape."""
        problems: list[str] = []
        if len(parsed.params) < self.required_params:
            problems.append(
                f"expected {self.required_params} parameter(s), got {len(parsed.params)}"
            )
        for key in sorted(self.required_args.difference(parsed.args)):
            problems.append(f"missing argument --{key}=...")
        for flag in sorted(self.required_flags.difference(parsed.flags or ())):
            problems.append(f"missing flag --{flag}")
        return problems

    def usage(self) -> str:
        parts = [self.name]
        parts.extend(f"<param{i + 1}>" for i in range(self.required_params))
        parts.extend(f"--{key}=<value>" for key in sorted(self.required_args))
        parts.extend(f"--{flag}" for flag in sorted(self.required_flags))
        return " ".join(parts)

    def invoke(
        self,
        params: Sequence[str],
        flags: frozenset[str] | None,
        args: Mapping[str, str],
    ) -> str:
        return self.handler(list(params), flags, dict(args))


class Registry:
    """Ordered, read-only collection of command descriptors.

    Order is match priority: when two descriptors share a name the first one
    registered always wins.
    """

    def __init__(self, descriptors: Iterable[CommandDescriptor] = ()) -> None:
        self._descriptors: tuple[CommandDescriptor, ...] = tuple(descriptors)

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"Registry({list(self.names())!r})"

    def names(self) -> list[str]:
        return [d.name for d in self._descriptors]

    def match(self, token: str, *, aliases: bool = False) -> CommandDescriptor | None:
        return next(
            (d for d in self._descriptors if d.responds_to(token, aliases=aliases)),
            None,
        )

    def extend(self, other: Iterable[CommandDescriptor]) -> "Registry":
        return Registry((*self._descriptors, *other))


def _resolve_handler(spec: CommandSpec, owner: Any) -> Handler:
    handler = spec.handler
    if isinstance(handler, str):
        if owner is None:
            raise RegistrationError(f"{spec.name}: handler {handler!r} needs an owner instance")
        try:
            handler = getattr(owner, handler)
        except AttributeError:
            raise RegistrationError(
                f"{spec.name}: {type(owner).__name__} has no handler {handler!r}"
            ) from None
    if not callable(handler):
        raise RegistrationError(f"{spec.name}: handler is not callable")
    return handler


def _names(values: Any, what: str, command: str) -> frozenset[str]:
    if isinstance(values, str):
        raise RegistrationError(f"{command}: {what} must be a collection of strings")
    values = list(values)
    if not all(isinstance(v, str) for v in values):
        raise RegistrationError(f"{command}: {what} must be a collection of strings")
    return frozenset(v.lower() for v in values)


def describe(spec: CommandSpec, owner: Any = None) -> CommandDescriptor:
    """Bind one spec to its handler and freeze it into a descriptor."""

    if not isinstance(spec.name, str):
        raise RegistrationError(f"invalid command name {spec.name!r}")
    name = spec.name.strip().lower()
    if not name or any(ch.isspace() for ch in name):
        raise RegistrationError(f"invalid command name {spec.name!r}")
    if not isinstance(spec.required_params, int) or isinstance(spec.required_params, bool):
        raise RegistrationError(f"{name}: required_params must be an int")
    if spec.required_params < 0:
        raise RegistrationError(f"{name}: required_params must be >= 0")
    if spec.summary is not None and not isinstance(spec.summary, str):
        raise RegistrationError(f"{name}: summary must be a string")

    try:
        required_args = _names(spec.required_args, "required_args", name)
        required_flags = _names(spec.required_flags, "required_flags", name)
        aliases = _names(spec.aliases, "aliases", name)
    except TypeError:
        raise RegistrationError(f"{name}: metadata must be collections of strings") from None

    handler = _resolve_handler(spec, owner)
    doc = (getattr(handler, "__doc__", None) or "").strip()
    summary = spec.summary or (doc.splitlines()[0].strip() if doc else "Run command")

    return CommandDescriptor(
        name=name,
        handler=handler,
        required_params=spec.required_params,
        required_args=required_args,
        required_flags=required_flags,
        aliases=aliases,
        summary=summary,
    )


def build_registry(
    specs: Iterable[CommandSpec],
    owner: Any = None,
    *,
    no_such_method_message: str = DEFAULT_NO_SUCH_METHOD_MESSAGE,
) -> Registry:
    """Build a registry from declarative specs, skipping the ones that fail.

    A spec whose handler cannot be resolved is logged with
    ``no_such_method_message`` and left out; the remaining specs still
    register.
    """

    descriptors: list[CommandDescriptor] = []
    seen: set[str] = set()
    for spec in specs:
        try:
            descriptor = describe(spec, owner)
        except RegistrationError as e:
            logger.warning("%s (%s): %s", no_such_method_message, e.code.name, e)
            continue
        if descriptor.name in seen:
            logger.warning(
                "Command %r is registered more than once (%s); the first one wins",
                descriptor.name,
                ErrorCode.E_HANDLER_SHADOWED.name,
            )
        seen.add(descriptor.name)
        descriptors.append(descriptor)
    return Registry(descriptors)
