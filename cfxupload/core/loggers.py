"""
Logging sinks for cfxupload.

Everything in the package logs through ``logging.getLogger(__name__)``; this
module attaches the single handler for the run: a Rich console handler for
local use, or a handler that speaks GitHub Actions workflow commands.
"""
import logging
import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.logging import RichHandler

from cfxupload.rich_utils.ui_helpers import get_console

PACKAGE_LOGGER = "cfxupload"


def escape_workflow_data(message: str) -> str:
    """Escape a message for use in a workflow command"""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GitHubActionsHandler(logging.Handler):
    """Emits log records as GitHub Actions workflow commands."""

    COMMANDS = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(level=logging.DEBUG)
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            command = self.COMMANDS.get(record.levelno)
            if command is None:
                line = message
            else:
                line = f"::{command}::{escape_workflow_data(message)}"

            stream = self.stream or sys.stdout
            stream.write(line + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def configure_logging(
    debug: bool = False,
    github_actions: bool = False,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Install the run's log handler on the package logger.

    Args:
        debug: Emit debug records
        github_actions: Use workflow commands instead of the Rich console
        console: Console for the Rich handler (default: get_console())

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if github_actions:
        handler: logging.Handler = GitHubActionsHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = RichHandler(
            console=console or get_console(),
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False

    return logger
