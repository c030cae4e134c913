"""Orchestration of a split run.

Plans every group collection with the selected strategy and only then
hands them to the group writer, so a failure while enumerating any
location leaves the output directory untouched.
"""

import logging
from pathlib import Path

from .models import SplitConfig, SplitResult
from .ports import GroupWriterPort, SplitterPort

logger = logging.getLogger(__name__)


class SplitService:
    """Runs a splitting strategy and persists its groups."""

    def __init__(self, splitter: SplitterPort, writer: GroupWriterPort):
        self.splitter = splitter
        self.writer = writer

    def run(self, config: SplitConfig) -> SplitResult:
        """Plan and write the groups for ``config``.

        Raises:
            ConfigurationError: If the strategy cannot run with ``config``.
            DiscoveryError: If input enumeration fails. Nothing is written.
            OSError: If a group artifact cannot be written.
        """
        logger.info(
            f"Splitting into {config.num_groups} groups using '{self.splitter.name}' "
            f"from {', '.join(config.locations)}"
        )
        collections = self.splitter.plan(config)

        written: list[Path] = []
        input_count = 0
        displaced_count = 0
        group_count = 0
        for collection in collections:
            # Displaced entries were loaded but land in no group.
            input_count += len(collection.identifiers()) + len(collection.displaced)
            displaced_count += len(collection.displaced)
            group_count += len(collection)
            written.extend(self.writer.write(collection, config.groups_to))

        result = SplitResult(
            strategy=self.splitter.name,
            input_count=input_count,
            group_count=group_count,
            written=tuple(written),
            displaced_count=displaced_count,
        )
        logger.info(
            f"Wrote {len(result.written)} group files "
            f"({result.input_count} entries in {result.group_count} groups)"
        )
        if result.displaced_count:
            logger.warning(
                f"{result.displaced_count} of {result.input_count} entries were "
                f"displaced by the dependency group and not written"
            )
        return result


__all__ = ["SplitService"]
