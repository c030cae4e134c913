"""Dependency-aware splitting of loaded test records.

Independent tests are dealt round-robin across the regular groups. Tests
linked by dependency annotations are kept together in one reserved group
so that a single worker runs the whole chain in order.
"""

import logging

from .dependencies import annotate, collect_dependent_set
from .errors import ConfigurationError
from .models import GroupCollection, SplitConfig, TestRecord, unwrap
from .ports import AnnotationReaderPort, SplitterPort, TestLoaderPort

logger = logging.getLogger(__name__)


class RecordSplitter(SplitterPort):
    """Splits test records into groups, clustering dependent tests.

    Placement of the dependency group:
        The reserved group is placed at ``(counter mod effective) + 1``
        using the counter left over from the round-robin pass. That index
        may already hold independent tests, in which case they are
        replaced by the dependency group and do not appear in any output.
        This matches the established behaviour of the tool and is kept
        deliberately; a warning names the displaced tests.
    """

    name = "tests"

    def __init__(
        self,
        loader: TestLoaderPort | None,
        annotation_reader: AnnotationReaderPort | None = None,
    ):
        """Initialize the record splitter.

        Args:
            loader: Source of test records. May be None so that a missing
                loader is reported as a configuration error at plan time.
            annotation_reader: Optional reader used to populate dependency
                lists before they are resolved.
        """
        self.loader = loader
        self.annotation_reader = annotation_reader

    def load_records(self, config: SplitConfig) -> list[TestRecord]:
        """Load and unwrap the records of every configured location."""
        if self.loader is None:
            raise ConfigurationError(
                "Splitting tests by groups requires a test loader to be configured"
            )

        records: list[TestRecord] = []
        for location in config.locations:
            loaded = self.loader.load(location)
            logger.debug(f"Loaded {len(loaded)} tests from {location}")
            records.extend(unwrap(test) for test in loaded)
        return records

    def plan(self, config: SplitConfig) -> list[GroupCollection]:
        records = annotate(self.load_records(config), self.annotation_reader)
        dependent = collect_dependent_set(records)

        # One group is reserved for dependent tests.
        group_count = config.num_groups
        if dependent:
            group_count -= 1
        if group_count < 1:
            raise ConfigurationError(
                f"{config.num_groups} group(s) requested but {len(dependent)} "
                f"dependent tests need a reserved group; request at least 2 groups"
            )

        logger.info(f"Processing {len(records)} tests")

        groups = GroupCollection()
        counter = 0
        for record in records:
            if record.name in dependent:
                continue
            groups.assign((counter % group_count) + 1, record.name)
            counter += 1

        if dependent:
            index = (counter % group_count) + 1
            displaced = groups.replace(index, dependent.names())
            if displaced:
                logger.warning(
                    f"Dependency group placed at index {index} replaced "
                    f"{len(displaced)} test(s): {', '.join(displaced)}"
                )

        return [groups]


__all__ = ["RecordSplitter"]
