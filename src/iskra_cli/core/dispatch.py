import logging
from typing import Callable, Mapping, Sequence

from .config import DEFAULT_CONFIG, ShellConfig
from .errors import ErrorCode
from .parser import ParsedInput, parse_line
from .registry import Registry
from .results import EMPTY, EXIT, DispatchResult, DispatchStatus

logger = logging.getLogger(__name__)


class Dispatcher:
    """Match a command token against the registry and run its handler.

    ``help``, ``cliversion`` and ``exit`` are answered here and never reach
    the registry.
    """

    def __init__(self, registry: Registry, config: ShellConfig = DEFAULT_CONFIG) -> None:
        self.registry = registry
        self.config = config
        self._reserved: dict[str, Callable[[], DispatchResult]] = {
            "help": self._help,
            "cliversion": lambda: DispatchResult.output(self.config.version),
            "exit": lambda: EXIT,
        }

    def dispatch_line(self, line: str) -> DispatchResult:
        if not line.strip():
            return EMPTY
        parsed = parse_line(
            line,
            restore_spaces=self.config.restore_spaces,
            placeholder=self.config.placeholder,
        )
        return self.dispatch_parsed(parsed)

    def dispatch_parsed(self, parsed: ParsedInput) -> DispatchResult:
        return self.dispatch(parsed.command, parsed.params, parsed.flags, parsed.args)

    def dispatch(
        self,
        command: str,
        params: Sequence[str] = (),
        flags: frozenset[str] | None = None,
        args: Mapping[str, str] | None = None,
    ) -> DispatchResult:
        command = command.lower()
        reserved = self._reserved.get(command)
        if reserved is not None:
            return reserved()

        descriptor = self.registry.match(command, aliases=self.config.match_aliases)
        if descriptor is None:
            return DispatchResult.fail(
                DispatchStatus.NOT_FOUND,
                self.config.no_such_command_message,
                code=ErrorCode.E_COMMAND_NOT_FOUND,
                details={"command": command},
            )

        args = dict(args or {})
        if self.config.enforce_shape:
            problems = descriptor.missing(ParsedInput(command, list(params), flags, args))
            if problems:
                return DispatchResult.fail(
                    DispatchStatus.USAGE,
                    f"usage: {descriptor.usage()} ({'; '.join(problems)})",
                    code=ErrorCode.E_INPUT_INVALID,
                    details={"command": descriptor.name, "problems": problems},
                )

        try:
            text = descriptor.invoke(params, flags, args)
        except Exception as e:
            logger.exception("Command %r failed", descriptor.name)
            return DispatchResult.fail(
                DispatchStatus.FAILED,
                code=ErrorCode.E_HANDLER_FAILED,
                details={"command": descriptor.name, "exception": repr(e)},
            )

        return DispatchResult.output("" if text is None else str(text), command=descriptor.name)

    def _help(self) -> DispatchResult:
        if not len(self.registry):
            return DispatchResult.output("No commands registered.")
        width = max(len(d.name) for d in self.registry)
        lines = []
        shown: set[str] = set()
        for d in self.registry:
            if d.name in shown:
                continue
            shown.add(d.name)
            lines.append(f"{d.name.ljust(width)}  {d.summary}")
        lines.append("")
        lines.append("Built-in: help, cliversion, exit")
        return DispatchResult.output("\n".join(lines))
