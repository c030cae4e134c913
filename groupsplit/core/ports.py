"""Port interfaces for the groupsplit partitioner.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - TestLoaderPort: Load test records for an input location
   - AnnotationReaderPort: Read raw dependency annotations for a test
   - FileDiscoveryPort: Find candidate test files on disk
   - GroupWriterPort: Persist group artifacts

2. **Driving Ports** (the composition root calls into core)
   - SplitterPort: One partitioning strategy
"""

from abc import ABC, abstractmethod
from pathlib import Path

from .models import DependencyAnnotation, FileEntry, GroupCollection, LoadedTest, SplitConfig


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class TestLoaderPort(ABC):
    """Port for loading test records from an input location.

    Implementations parse or import test definitions and normalize them
    into TestRecord objects. Data-provider expansions are returned wrapped
    in a ParametrizedRecord; the core unwraps them.
    """

    __test__ = False

    @abstractmethod
    def load(self, location: str) -> list[LoadedTest]:
        """Load every test found under a location.

        Args:
            location: Path of the input location, relative to the
                project root the loader was created with.

        Returns:
            Records in a stable, loader-defined order. Empty list if the
            location holds no tests.

        Raises:
            DiscoveryError: If the location cannot be read or parsed.
        """


class AnnotationReaderPort(ABC):
    """Port for reading raw dependency annotations of a test."""

    @abstractmethod
    def dependencies_for(self, declaring_unit: str, method: str) -> list[str]:
        """Return the raw dependency references declared on a test.

        Args:
            declaring_unit: Module path, or ``module::Class`` for methods.
            method: Test function or method name.

        Returns:
            References in declaration order, unresolved. Empty list if the
            test declares none.

        Raises:
            DiscoveryError: If the declaring unit cannot be read.
        """

    def annotation_for(self, declaring_unit: str, method: str) -> DependencyAnnotation:
        """Return the full dependency declaration of a test.

        Readers that understand reference scopes or test aliases override
        this; the default carries only the module-scoped references from
        dependencies_for().

        Raises:
            DiscoveryError: If the declaring unit cannot be read.
        """
        return DependencyAnnotation(depends=tuple(self.dependencies_for(declaring_unit, method)))


class FileDiscoveryPort(ABC):
    """Port for locating candidate test files on disk."""

    @abstractmethod
    def find(
        self,
        root: Path,
        path_filter: str,
        exclude: str,
        patterns: tuple[str, ...],
    ) -> list[FileEntry]:
        """Find files under ``root`` matching the given filters.

        Args:
            root: Directory to search.
            path_filter: Only files whose relative path contains this
                string are returned.
            exclude: Directory name (or relative path) to skip entirely.
            patterns: Filename glob patterns; a file matching any is kept.

        Returns:
            FileEntry objects with paths relative to ``root``.

        Raises:
            DiscoveryError: If ``root`` does not exist or cannot be walked.
        """


class GroupWriterPort(ABC):
    """Port for persisting group artifacts."""

    @abstractmethod
    def write(self, collection: GroupCollection, pattern: str) -> list[Path]:
        """Write one artifact per group in the collection.

        Args:
            collection: Groups to persist, in the order they should be written.
            pattern: Output path prefix; the suite label (if any) and the
                group index are appended to it.

        Returns:
            Paths written, in write order.

        Raises:
            OSError: If an artifact cannot be written.
        """


# ============================================================================
# DRIVING PORTS (Composition root calls into core)
# ============================================================================


class SplitterPort(ABC):
    """A partitioning strategy.

    Every strategy enumerates its own input and returns the finished
    group collections; writing is left to the caller so that nothing is
    persisted until all collections are planned.
    """

    name: str = "splitter"

    @abstractmethod
    def plan(self, config: SplitConfig) -> list[GroupCollection]:
        """Compute the group assignment for a configuration.

        Returns:
            One collection per output namespace. Record and round-robin
            strategies return a single collection; the capacity-bounded
            strategy returns one per input location.

        Raises:
            ConfigurationError: If the strategy cannot run with ``config``.
            DiscoveryError: If input enumeration fails.
        """
