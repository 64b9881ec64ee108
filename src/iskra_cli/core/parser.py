"""Tokenizer for one line of user input.

A line breaks down into a command token, positional parameters, ``--flag``
switches and ``--key=value`` arguments::

    greet bob --loud=true --twice
    -> command="greet", params=["bob"], flags={"twice"}, args={"loud": "true"}

Everything is lower-cased first, so command names and argument keys are
case-insensitive. A quoted value (``--msg="hello there"``) survives the
whitespace split because the whitespace inside the quotes is collapsed to a
placeholder character before splitting.
"""

import re
from dataclasses import dataclass, field

from .errors import EmptyInputError

DEFAULT_PLACEHOLDER = "_"

# Restored to a space afterwards, so it must never appear in typed input.
_SPACE_MARK = "\ue000"

_QUOTED_VALUE = re.compile(r'(--\w+=")([^"]*)(")')
_WHITESPACE = re.compile(r"\s+")
_ARGUMENT = re.compile(r"^--(\w+)=(\S+)$")
_QUOTED_ARGUMENT = re.compile(r'^--(\w+)="(\S(?:.*\S)?)"$')
_FLAG = re.compile(r"^--(\w+)$")
_PARAM = re.compile(r"^[^-]\w*$")
# A quoted argument value stays inside one token even when it holds spaces.
_TOKEN = re.compile(r'(?:--\w+="[^"]*"|\S)+')


@dataclass(frozen=True)
class ParsedInput:
    command: str
    params: list[str] = field(default_factory=list)
    flags: frozenset[str] | None = frozenset()
    args: dict[str, str] = field(default_factory=dict)


def _words(line: str) -> list[str]:
    return line.split()


def extract_command(line: str) -> str:
    """Return the first word of the lower-cased line."""
    words = _words(line.lower())
    if not words:
        raise EmptyInputError("cannot parse an empty line")
    return words[0]


def normalize_arguments(line: str, placeholder: str = DEFAULT_PLACEHOLDER) -> str:
    """Collapse whitespace inside quoted argument values and turn commas into periods."""

    def collapse(m: re.Match) -> str:
        inner = _WHITESPACE.sub(placeholder, m.group(2).strip())
        return m.group(1) + inner + m.group(3)

    return _QUOTED_VALUE.sub(collapse, line).replace(",", ".")


def extract_arguments(
    line: str,
    *,
    restore_spaces: bool = False,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> dict[str, str]:
    """Collect ``--key=value`` and ``--key="quoted value"`` tokens.

    Quoted values reach the caller with ``placeholder`` where their whitespace
    was, unless ``restore_spaces`` is set.
    """

    mark = _SPACE_MARK if restore_spaces else placeholder
    out: dict[str, str] = {}
    for token in _words(normalize_arguments(line.lower(), mark)):
        m = _QUOTED_ARGUMENT.match(token)
        if m:
            value = m.group(2)
            if restore_spaces:
                value = value.replace(_SPACE_MARK, " ")
            out[m.group(1)] = value
            continue
        m = _ARGUMENT.match(token)
        if m:
            out[m.group(1)] = m.group(2)
    return out


def extract_flags(line: str) -> frozenset[str]:
    """Collect bare ``--name`` switches."""
    normalized = normalize_arguments(line.lower())
    return frozenset(m.group(1) for m in map(_FLAG.match, _words(normalized)) if m)


def extract_params(line: str) -> list[str]:
    """Collect positional words left to right.

    A quoted argument value counts as one token, so its words are never
    mistaken for parameters. Tokens are returned as typed, apart from case.
    """
    return [token for token in _TOKEN.findall(line.lower()) if _PARAM.match(token)]


def parse_line(
    line: str,
    *,
    restore_spaces: bool = False,
    placeholder: str = DEFAULT_PLACEHOLDER,
) -> ParsedInput:
    command = extract_command(line)
    params = [p for p in extract_params(line) if p != command]
    return ParsedInput(
        command=command,
        params=params,
        flags=extract_flags(line),
        args=extract_arguments(line, restore_spaces=restore_spaces, placeholder=placeholder),
    )
