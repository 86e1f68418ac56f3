import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI tests install handlers on the package logger; undo that after each test."""
    yield
    logger = logging.getLogger("cfxupload")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
