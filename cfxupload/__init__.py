"""cfxupload - upload packaged assets to the CFX portal."""

__version__ = "1.0.0"
