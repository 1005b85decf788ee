"""update-pt CLI entry point."""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from ptupdate import __version__
from ptupdate.config import BACKENDS, DOWNLOAD_URL_ENV, RELEASE_NOTES_URL, UpdaterConfig
from ptupdate.reporter import Reporter
from ptupdate.updater import UpdateWorkflow

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

# Exit code after Ctrl-C, as a shell reports it
EXIT_INTERRUPTED = 130


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, console=err_console)],
    )


@click.command(
    "update-pt",
    epilog=f"Release notes: {RELEASE_NOTES_URL}",
)
@click.option("-v", "--verbose", is_flag=True, help="Log every external command")
@click.option("-y", "--yes", "assume_yes", is_flag=True, help="Upgrade without asking")
@click.option(
    "-C",
    "--directory",
    type=click.Path(file_okay=False, exists=True),
    help="Platform Tools directory (defaults to the current one)",
)
@click.option("--url", envvar=DOWNLOAD_URL_ENV, help="Download link of the latest release")
@click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    default="system",
    show_default=True,
    help="Use curl/unzip/cp or the built-in implementations",
)
@click.version_option(__version__, prog_name="update-pt")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    assume_yes: bool,
    directory: str | None,
    url: str | None,
    backend: str,
) -> None:
    """Update Android SDK Platform Tools in place.

    Run from the directory holding fastboot. The latest release is compared
    with the local version and installed after confirmation.
    """
    setup_logging(verbose)
    program_name = ctx.info_name or "update-pt"

    try:
        config = UpdaterConfig.from_env(
            download_url=url,
            working_dir=directory,
            backend=backend,
            assume_yes=assume_yes,
            program_name=program_name,
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    reporter = Reporter(program_name, console=console, err_console=err_console)
    workflow = UpdateWorkflow(config, reporter=reporter)

    try:
        exit_code = workflow()
    except KeyboardInterrupt:
        reporter.error("interrupted")
        exit_code = EXIT_INTERRUPTED

    ctx.exit(exit_code)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
