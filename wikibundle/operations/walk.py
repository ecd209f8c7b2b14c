"""Directory traversal."""

import os
from collections.abc import Iterator
from pathlib import Path


def iter_files(root: str | Path) -> Iterator[Path]:
    """Yield every regular file below ``root``, recursing into subdirectories.

    Entries are visited in name order so repeated walks of the same tree agree.
    A missing root yields nothing.
    """
    root = Path(root)
    if not root.is_dir():
        return

    with os.scandir(root) as it:
        entries = sorted(it, key=lambda entry: entry.name)

    for entry in entries:
        if entry.is_dir():
            yield from iter_files(entry.path)
        elif entry.is_file():
            yield Path(entry.path)
