import json
import logging
from typing import IO

import click

from .dispatch import Dispatcher
from .errors import ErrorCode
from .results import DispatchResult, DispatchStatus

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BUG = 70


def render(result: DispatchResult, *, output: str = "text", file: IO[str] | None = None) -> None:
    if output == "json":
        if result.status is DispatchStatus.EMPTY:
            return
        payload = {
            "ok": result.ok,
            "status": result.status.value,
            "code": result.code.name,
            "code_num": int(result.code),
            "text": result.text,
            "details": result.details,
        }
        click.echo(json.dumps(payload, default=str), file=file)
        return

    if result.visible:
        click.echo(result.text.rstrip(), file=file)


def run_shell(
    dispatcher: Dispatcher,
    *,
    stdin: IO[str] | None = None,
    stdout: IO[str] | None = None,
    prompt: str | None = None,
    output: str = "text",
) -> int:
    """Read, dispatch and print lines until ``exit`` or end of input.

    Any exception escaping the dispatcher ends the session with
    ``EXIT_BUG``; there is no restart.
    """

    stdin = stdin if stdin is not None else click.get_text_stream("stdin")
    prompt = prompt if prompt is not None else dispatcher.config.prompt
    if output == "json":
        prompt = ""

    while True:
        line = ""
        try:
            click.echo(prompt, nl=False, file=stdout)
            line = stdin.readline()
            if not line:
                # end of input
                if prompt:
                    click.echo(file=stdout)
                return EXIT_OK

            result = dispatcher.dispatch_line(line)
            if result.status is DispatchStatus.EXIT:
                return EXIT_OK
            render(result, output=output, file=stdout)
        except Exception:
            logger.exception(
                "Unhandled error while dispatching %r (%s)",
                line.rstrip("\n"),
                ErrorCode.E_BUG_UNHANDLED.name,
            )
            return EXIT_BUG
