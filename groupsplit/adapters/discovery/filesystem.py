"""Filesystem file discovery adapter.

Implements FileDiscoveryPort by walking a project directory and matching
file names against glob patterns. Directories are visited in sorted order
so discovery order is stable between runs on the same tree.
"""

import fnmatch
import logging
import os
from pathlib import Path

from groupsplit.core.errors import DiscoveryError
from groupsplit.core.models import FileEntry
from groupsplit.core.ports import FileDiscoveryPort

logger = logging.getLogger(__name__)


def is_excluded(relative_dir: str, exclude: str) -> bool:
    """Check whether a directory (relative to the root) is excluded.

    A plain name such as ``.venv`` excludes every directory with that name
    at any depth. A value containing ``/`` excludes that relative path and
    everything below it.
    """
    exclude = exclude.strip("/")
    if not exclude:
        return False
    if "/" in exclude:
        return relative_dir == exclude or relative_dir.startswith(f"{exclude}/")
    return exclude in relative_dir.split("/")


class FilesystemDiscovery(FileDiscoveryPort):
    """Finds test files on the local filesystem."""

    def find(
        self,
        root: Path,
        path_filter: str,
        exclude: str,
        patterns: tuple[str, ...],
    ) -> list[FileEntry]:
        root = Path(root)
        if not root.is_dir():
            raise DiscoveryError(f"Project root does not exist or is not a directory: {root}")

        path_filter = path_filter.strip("/")
        entries = []

        def on_error(error: OSError) -> None:
            raise DiscoveryError(f"Failed to read {error.filename}: {error}") from error

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            relative_dir = Path(dirpath).relative_to(root).as_posix()
            if relative_dir == ".":
                relative_dir = ""

            # Prune in place so os.walk never descends into excluded directories.
            dirnames[:] = sorted(
                name
                for name in dirnames
                if not is_excluded(f"{relative_dir}/{name}".lstrip("/"), exclude)
            )

            for filename in sorted(filenames):
                if not any(fnmatch.fnmatch(filename, pattern) for pattern in patterns):
                    continue
                relative_path = f"{relative_dir}/{filename}".lstrip("/")
                if path_filter and path_filter not in relative_path:
                    continue
                entries.append(FileEntry(relative_path))

        logger.debug(f"Discovered {len(entries)} files under {root} matching '{path_filter}'")
        return entries


__all__ = ["FilesystemDiscovery", "is_excluded"]
