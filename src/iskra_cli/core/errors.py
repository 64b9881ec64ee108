from enum import IntEnum


class ErrorCode(IntEnum):
    """Stable numeric error catalog."""

    OK = 0

    # 1xxx: input
    E_INPUT_EMPTY = 1001
    E_INPUT_INVALID = 1002
    E_COMMAND_NOT_FOUND = 1003

    # 2xxx: config
    E_CONFIG_INVALID = 2002

    # 4xxx: plugins and registration
    E_PLUGIN_IMPORT = 4001
    E_HANDLER_UNRESOLVED = 4002
    E_HANDLER_SHADOWED = 4003

    # 5xxx: handler runtime
    E_HANDLER_FAILED = 5001

    # 9xxx: bugs
    E_BUG_UNHANDLED = 9001


class IskraError(Exception):
    code: ErrorCode = ErrorCode.E_BUG_UNHANDLED

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code


class RegistrationError(IskraError):
    code = ErrorCode.E_HANDLER_UNRESOLVED


class ConfigError(IskraError):
    code = ErrorCode.E_CONFIG_INVALID


class EmptyInputError(IskraError, ValueError):
    code = ErrorCode.E_INPUT_EMPTY
