"""
Command-line interface for cfxupload.

``cfx-upload upload`` runs from a developer machine; ``cfx-upload action``
runs inside a GitHub Actions job.
"""
from cfxupload.cli.app import app

__all__ = ["app"]
