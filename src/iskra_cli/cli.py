import logging
import sys
from typing import IO

import click

from .core.config import CLI_VERSION, ShellConfig
from .core.errors import ConfigError
from .core.dispatch import Dispatcher
from .core.plugins import load_entry_point_plugins, load_plugins
from .core.registry import DEFAULT_NO_SUCH_METHOD_MESSAGE
from .core.shell import run_shell

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _configure_logging(level: str) -> None:
    logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(level.upper())


def build_dispatcher(
    config: ShellConfig,
    *,
    plugins: str | None = None,
    use_entry_points: bool = True,
) -> Dispatcher:
    pkg = __package__ or __name__.split(".")[0]
    message = config.no_such_method_message
    registry = load_plugins(plugins or f"{pkg}.plugins", no_such_method_message=message)
    if use_entry_points:
        registry = registry.extend(load_entry_point_plugins(no_such_method_message=message))
    return Dispatcher(registry, config)


@click.command(name="iskra-cli")
@click.option("--prompt", default="$ ", show_default=True, help="Prompt literal.")
@click.option(
    "--no-such-command-message",
    default="No such command",
    show_default=True,
    help="Text printed when no command matches.",
)
@click.option(
    "--no-such-method-message",
    default=DEFAULT_NO_SUCH_METHOD_MESSAGE,
    show_default=True,
    help="Diagnostic logged when a command handler cannot be resolved.",
)
@click.option(
    "--restore-spaces/--keep-placeholder",
    default=False,
    show_default=True,
    help="Pass quoted argument values with spaces instead of the placeholder.",
)
@click.option("--placeholder", default="_", show_default=True)
@click.option("--match-aliases", is_flag=True, default=False, help="Also match command aliases.")
@click.option(
    "--enforce-shape",
    is_flag=True,
    default=False,
    help="Refuse commands missing required params, args or flags.",
)
@click.option("--plugins", default=None, metavar="PACKAGE", help="Package to load commands from.")
@click.option("--entry-points/--no-entry-points", default=True, show_default=True)
@click.option(
    "--input",
    "input_file",
    type=click.File("r"),
    default="-",
    help="Read lines from a file instead of stdin.",
)
@click.option(
    "--output",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    show_default=True,
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    show_default=True,
)
@click.version_option(CLI_VERSION, prog_name="iskra-cli")
@click.pass_context
def root(
    ctx: click.Context,
    prompt: str,
    no_such_command_message: str,
    no_such_method_message: str,
    restore_spaces: bool,
    placeholder: str,
    match_aliases: bool,
    enforce_shape: bool,
    plugins: str | None,
    entry_points: bool,
    input_file: IO[str],
    output: str,
    log_level: str,
) -> None:
    """Interactive command dispatcher."""

    _configure_logging(log_level)
    try:
        config = ShellConfig(
            prompt=prompt,
            no_such_command_message=no_such_command_message,
            no_such_method_message=no_such_method_message,
            placeholder=placeholder,
            restore_spaces=restore_spaces,
            match_aliases=match_aliases,
            enforce_shape=enforce_shape,
        )
    except ConfigError as e:
        raise click.BadParameter(str(e)) from None

    dispatcher = build_dispatcher(config, plugins=plugins, use_entry_points=entry_points)
    ctx.exit(run_shell(dispatcher, stdin=input_file, output=output.lower()))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point returning the process exit code."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        rv = root.main(
            args=argv,
            prog_name="iskra-cli",
            auto_envvar_prefix="ISKRA_CLI",
            standalone_mode=False,
        )
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        return 130
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
