"""
Main CLI application for cfxupload.

Defines the Typer application structure and command routing; commands are
thin and delegate to the service layer.
"""
import typer

from cfxupload.cli.commands.action import action_command
from cfxupload.cli.commands.upload import upload_command


# Initialize Typer app
app = typer.Typer(help="cfx-upload - upload assets to the CFX portal", no_args_is_help=True)

# Register commands
app.command("upload", help="Authenticate and upload an asset to the CFX portal.")(upload_command)
app.command("action", help="Run as a GitHub Action, reading INPUT_* environment variables.")(action_command)
