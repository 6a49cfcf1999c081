"""sandbox-resolver CLI - assemble preview sandboxes from a component registry."""

import click

from .commands import resolve_command
from .logging_setup import init_json_logging
from .registry.commands import info_command


@click.group()
@click.version_option(package_name="sandbox-resolver")
@click.option("--log-file", envvar="SANDBOX_RESOLVER_LOG_PATH", help="JSONL log destination")
@click.option("--log-level", envvar="SANDBOX_RESOLVER_LOG_LEVEL", help="Log level (DEBUG, INFO, WARNING)")
def cli(log_file: str | None, log_level: str | None):
    """Resolve registry components into preview sandbox file trees."""
    init_json_logging(log_file, log_level)


cli.add_command(resolve_command)
cli.add_command(info_command)


def main():
    """Entry point for the sandbox-resolver console script."""
    cli()


if __name__ == "__main__":
    main()
