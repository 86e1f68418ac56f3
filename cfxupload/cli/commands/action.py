"""
GitHub Action command implementation.

Reads the action inputs from the runner environment and reports progress
through workflow commands.
"""
import logging
import sys

from cfxupload.core.loggers import configure_logging
from cfxupload.core.uploader import UploadService
from cfxupload.upload.environment_detector import ActionEnvironmentDetector

logger = logging.getLogger(__name__)


def action_command():
    """Upload an asset to the CFX portal from a GitHub Actions job."""
    detector = ActionEnvironmentDetector()
    configure_logging(debug=detector.is_debug_enabled(), github_actions=True)

    if not detector.is_github_actions():
        logger.warning("GITHUB_ACTIONS is not set; reading action inputs from the local environment.")
    logger.debug("Action environment: %s", detector.get_environment_summary())

    upload_service = UploadService()
    exit_code = upload_service.execute_upload(detector.get_run_config)

    if exit_code != 0:
        sys.exit(exit_code)
