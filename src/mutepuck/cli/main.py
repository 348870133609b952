"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from mutepuck import __version__
from mutepuck.exceptions import ConfigurationError, format_error_for_display
from mutepuck.models import PuckConfig
from mutepuck.models.config import DEFAULT_CONFIG_PATH
from mutepuck.orchestration import Orchestrator

from .commands import config, led

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: Optional[str]) -> None:
    """
    Configure logging for the daemon.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, log at DEBUG level and also to ./mutepuck-debug.log
        log_file: Additional log file (optional)
        log_level: Explicit level name, overrides verbose (also MUTEPUCK_LOG_LEVEL)
    """
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    if log_level:
        level = getattr(logging, log_level.upper())

    if debug and not log_file:
        log_file = Path.cwd() / "mutepuck-debug.log"

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        # Rotating file handler (keeps last 5 files, max 10MB each)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_file}")


def _fail(error: BaseException) -> None:
    """Print a fatal error without traceback and exit with status 1."""
    user_message, recovery_hint = format_error_for_display(error)

    click.echo(f"ERROR: {user_message}", err=True)
    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__, prog_name="mutepuck")
@click.option(
    '--config', 'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help='Configuration file (optional, defaults are used when missing)'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, also logs to ./mutepuck-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Also log to this file'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    envvar='MUTEPUCK_LOG_LEVEL',
    default=None,
    help='Explicit log level (env: MUTEPUCK_LOG_LEVEL)'
)
def cli(
    ctx,
    config_path: Path,
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: Optional[str]
):
    """
    Mute puck daemon - keeps a USB mute button in sync with your microphones.

    Pressing and releasing the puck mutes every application that is
    recording (or unmutes them all if they are all muted). The LED shows
    the combined state:

    \b
      off           no application is recording
      green         everything unmuted
      red pulsing   everything muted
      red/green     applications disagree

    \b
    Examples:
      # Run the daemon
      mutepuck -v

      # Check the LED hardware
      mutepuck led muted

      # Show the effective configuration
      mutepuck config show
    """

    setup_logging(verbose, debug, log_file, log_level)

    try:
        config_obj = PuckConfig.load_or_default(config_path)
    except ConfigurationError as e:
        logger.error(e.technical_message)
        _fail(e)

    ctx.obj = {'config': config_obj, 'config_path': config_path}

    if ctx.invoked_subcommand is not None:
        return

    logger.info("Starting mute puck daemon")

    orchestrator = Orchestrator(config_obj)
    try:
        orchestrator.install_signal_handlers()
        orchestrator.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception("Mute puck daemon failed")
        _fail(e)
    finally:
        orchestrator.shutdown()


cli.add_command(config)
cli.add_command(led)


if __name__ == "__main__":
    cli()
