"""Splitting of test files found on disk.

Neither strategy here loads or parses tests, so dependencies between
tests are not taken into account. Two assignment schemes are offered:

- RoundRobinFileSplitter deals files one at a time across all groups.
- CapacityFileSplitter sorts files and fills each group up to a cap
  before moving to the next, keeping neighbouring files together.
"""

import logging

from .errors import ConfigurationError
from .models import FileEntry, GroupCollection, SplitConfig, suite_label_for
from .ports import FileDiscoveryPort, SplitterPort

logger = logging.getLogger(__name__)


def discover_files(
    discovery: FileDiscoveryPort, config: SplitConfig, location: str
) -> list[FileEntry]:
    """Find the test files of one location using the configured filters."""
    return discovery.find(
        root=config.project_root,
        path_filter=location,
        exclude=config.exclude_path,
        patterns=config.file_patterns,
    )


def max_files_per_group(total: int, num_groups: int) -> int:
    """Upper bound of files per group for the capacity-bounded scheme.

    ``total // num_groups`` (or 1 when there are no more files than
    groups), plus one if the division leaves a remainder.
    """
    if num_groups < 1:
        raise ConfigurationError(f"num_groups must be positive, got {num_groups}")
    per_group = total // num_groups if total > num_groups else 1
    if total % num_groups > 0:
        per_group += 1
    return per_group


class RoundRobinFileSplitter(SplitterPort):
    """Assigns files to ``(counter mod N) + 1`` in discovery order."""

    name = "files_round_robin"

    def __init__(self, discovery: FileDiscoveryPort):
        self.discovery = discovery

    def plan(self, config: SplitConfig) -> list[GroupCollection]:
        files: list[FileEntry] = []
        for location in config.locations:
            files.extend(discover_files(self.discovery, config, location))

        logger.info(f"Processing {len(files)} files")

        groups = GroupCollection()
        for counter, entry in enumerate(files):
            groups.assign((counter % config.num_groups) + 1, entry.relative_path)
        return [groups]


class CapacityFileSplitter(SplitterPort):
    """Fills groups with contiguous runs of sorted files.

    Each location is split on its own and labelled with its suite name, so
    several locations can be written to the same output directory without
    their group files colliding. At most ``num_groups`` groups are opened
    per location; the last one takes whatever the cap leaves over.
    """

    name = "files"

    def __init__(self, discovery: FileDiscoveryPort):
        self.discovery = discovery

    def plan(self, config: SplitConfig) -> list[GroupCollection]:
        return [self.plan_location(config, location) for location in config.locations]

    def plan_location(self, config: SplitConfig, location: str) -> GroupCollection:
        """Split the files of a single location."""
        files = sorted(
            discover_files(self.discovery, config, location),
            key=lambda entry: entry.relative_path,
        )
        per_group = max_files_per_group(len(files), config.num_groups)

        logger.info(f"Processing {len(files)} files")

        groups = GroupCollection(suite_label=suite_label_for(location))
        index = 1
        in_group = 0
        for entry in files:
            # Move on once the cap is reached, unless this is the last group.
            if in_group == per_group and len(groups) < config.num_groups:
                index += 1
                in_group = 0
            groups.assign(index, entry.relative_path)
            in_group += 1
        return groups


__all__ = [
    "CapacityFileSplitter",
    "RoundRobinFileSplitter",
    "discover_files",
    "max_files_per_group",
]
