import os
import sys

from rich.console import Console

def is_ci_environment():
    return (
        os.getenv('CI') is not None or
        os.getenv('GITHUB_ACTIONS') is not None or
        not sys.stderr.isatty()
    )

def get_console() -> Console:
    """Detect environment and create a stderr console for log output."""
    if is_ci_environment():
        # CI/automated environment - no colors, no interactive elements
        return Console(stderr=True, force_terminal=False, no_color=True)

    # Interactive terminal - full Rich capabilities
    return Console(stderr=True)
