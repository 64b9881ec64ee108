import dataclasses
from dataclasses import dataclass
from typing import Any

from .errors import ConfigError
from .registry import DEFAULT_NO_SUCH_METHOD_MESSAGE

CLI_VERSION = "2.0.2"


@dataclass(frozen=True)
class ShellConfig:
    """Tunables shared by the dispatcher and the interactive loop.

    Args:
        prompt: Literal written before every line is read.
        version: Text returned by the ``cliversion`` reserved command.
        no_such_command_message: Result text when no command matches.
        no_such_method_message: Diagnostic logged when a command's handler
            cannot be resolved at registration.
        placeholder: Character that replaces whitespace inside quoted
            argument values.
        restore_spaces: Hand quoted values to handlers with spaces instead
            of the placeholder.
        match_aliases: Also match a command's aliases.
        enforce_shape: Refuse to dispatch when required params, args or
            flags are missing.
    """

    prompt: str = "$ "
    version: str = CLI_VERSION
    no_such_command_message: str = "No such command"
    no_such_method_message: str = DEFAULT_NO_SUCH_METHOD_MESSAGE
    placeholder: str = "_"
    restore_spaces: bool = False
    match_aliases: bool = False
    enforce_shape: bool = False

    def __post_init__(self) -> None:
        if not self.prompt:
            raise ConfigError("prompt must not be empty")
        if len(self.placeholder) != 1 or self.placeholder.isspace():
            raise ConfigError(
                f"placeholder must be a single non-space character, got {self.placeholder!r}"
            )

    def replace(self, **changes: Any) -> "ShellConfig":
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = ShellConfig()
