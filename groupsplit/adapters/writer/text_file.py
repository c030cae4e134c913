"""Plain text group file adapter.

Implements GroupWriterPort by writing one file per group, containing the
group's identifiers one per line. Files are overwritten on every run;
nothing is locked or renamed, so concurrent runs against the same pattern
must be serialized by the caller.
"""

import logging
from pathlib import Path

from groupsplit.core.models import GroupCollection
from groupsplit.core.ports import GroupWriterPort

logger = logging.getLogger(__name__)


def group_file_path(pattern: str, index: int, suite_label: str | None = None) -> Path:
    """Build the artifact path for a group.

    Examples:
        >>> group_file_path("tests/_data/group_", 2)
        PosixPath('tests/_data/group_2')
        >>> group_file_path("tests/_data/group_", 1, "unit")
        PosixPath('tests/_data/group_unit_1')
    """
    filename = pattern
    if suite_label:
        filename += f"{suite_label}_"
    return Path(f"{filename}{index}")


def read_group(path: str | Path) -> list[str]:
    """Read a group artifact back into its identifiers."""
    content = Path(path).read_text(encoding="utf-8")
    if not content:
        return []
    return content.split("\n")


class TextFileGroupWriter(GroupWriterPort):
    """Writes each group to ``<pattern>[<suite>_]<index>``."""

    def write(self, collection: GroupCollection, pattern: str) -> list[Path]:
        written = []
        for group in collection:
            path = group_file_path(pattern, group.index, collection.suite_label)
            logger.info(f"Writing {path}")
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text("\n".join(group.members), encoding="utf-8")
            except OSError as e:
                logger.error(f"Failed to write group file {path}: {e}")
                raise
            written.append(path)
        return written


__all__ = ["TextFileGroupWriter", "group_file_path", "read_group"]
