"""Overlay of auxiliary content onto a directory tree."""

import logging
import shutil
from pathlib import Path

from wikibundle.operations.walk import iter_files

logger = logging.getLogger(__name__)


def overlay_directory(source: Path, target: Path) -> list[str]:
    """Copy every file of ``source`` into ``target``, overwriting clashes.

    Files already in ``target`` that ``source`` does not contain are kept.

    Returns:
        Relative paths of the files copied, empty if ``source`` does not exist
    """
    if not source.is_dir():
        logger.warning(f"Overlay source {source} does not exist, skipping")
        return []

    copied = [path.relative_to(source).as_posix() for path in iter_files(source)]
    shutil.copytree(source, target, dirs_exist_ok=True)
    logger.info(f"Overlaid {len(copied)} files from {source} onto {target}")
    return copied
