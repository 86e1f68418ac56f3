"""
Workspace Packager

Compresses a workspace directory into a zip archive laid out as
``<asset_name>/<relative path>``, skipping excluded paths.
"""

import logging
import os
import zipfile
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_ZIP_EXCLUDES = [
    ".git/**",
    ".github/**",
    ".vscode/**",
    "node_modules/**",
]


def _normalize_path(value: str) -> str:
    return value.replace("\\", "/")


def _match_pattern(relative_path: str, pattern: str) -> bool:
    normalized_path = _normalize_path(relative_path)
    normalized_pattern = _normalize_path(pattern).strip()

    if normalized_pattern.endswith("/**"):
        prefix = normalized_pattern[:-3]
        return normalized_path == prefix or normalized_path.startswith(f"{prefix}/")

    return normalized_path == normalized_pattern or normalized_path.startswith(f"{normalized_pattern}/")


def should_exclude_path(relative_path: str, excludes: Iterable[str]) -> bool:
    """Check a workspace-relative path against exclude patterns"""
    return any(_match_pattern(relative_path, pattern) for pattern in excludes)


def create_archive(
    workspace_path: str,
    asset_name: str,
    exclude_patterns: Optional[List[str]] = None,
    output_path: Optional[str] = None,
    default_excludes: Optional[List[str]] = None,
) -> str:
    """
    Build a zip archive of the workspace.

    Args:
        workspace_path: Directory to package
        asset_name: Top-level folder name inside the archive and default file stem
        exclude_patterns: Extra patterns on top of the default excludes
        output_path: Archive location (default: ``<asset_name>.zip`` in cwd)
        default_excludes: Base exclude list (default: DEFAULT_ZIP_EXCLUDES)

    Returns:
        Absolute path of the written archive
    """
    base_excludes = DEFAULT_ZIP_EXCLUDES if default_excludes is None else default_excludes
    excludes = [*base_excludes, *(exclude_patterns or [])]
    archive_path = Path(output_path or f"{asset_name}.zip").resolve()
    workspace = Path(workspace_path).resolve()

    logger.debug("Packaging %s into %s", workspace, archive_path)

    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for current_dir, dir_names, file_names in os.walk(workspace):
            current = Path(current_dir)

            # Prune excluded directories so os.walk never descends into them
            kept_dirs = []
            for dir_name in sorted(dir_names):
                relative = _normalize_path(os.path.relpath(current / dir_name, workspace))
                if should_exclude_path(relative, excludes):
                    logger.debug("Skipping excluded path: %s", relative)
                    continue
                kept_dirs.append(dir_name)
            dir_names[:] = kept_dirs

            for file_name in sorted(file_names):
                full_path = current / file_name
                if full_path.resolve() == archive_path:
                    continue

                relative = _normalize_path(os.path.relpath(full_path, workspace))
                if should_exclude_path(relative, excludes):
                    logger.debug("Skipping excluded path: %s", relative)
                    continue

                if not full_path.is_file():
                    continue

                entry_name = f"{asset_name}/{relative}"
                logger.debug("Adding file to zip: %s", entry_name)
                archive.write(full_path, entry_name)

    return str(archive_path)
