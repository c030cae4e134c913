"""Fake GroupWriterPort implementation for testing."""

from pathlib import Path

from groupsplit.core.models import GroupCollection
from groupsplit.core.ports import GroupWriterPort


class FakeGroupWriterPort(GroupWriterPort):
    """Captures written groups in memory instead of on disk.

    ``files`` maps each would-be path to the identifiers it would hold.
    """

    def __init__(self):
        self.files: dict[Path, list[str]] = {}
        self.written_collections: list[GroupCollection] = []
        self.patterns: list[str] = []
        self.should_fail: bool = False

    def write(self, collection: GroupCollection, pattern: str) -> list[Path]:
        if self.should_fail:
            raise OSError("Permission denied")

        self.written_collections.append(collection)
        self.patterns.append(pattern)
        written = []
        for group in collection:
            suite = f"{collection.suite_label}_" if collection.suite_label else ""
            path = Path(f"{pattern}{suite}{group.index}")
            self.files[path] = list(group.members)
            written.append(path)
        return written
