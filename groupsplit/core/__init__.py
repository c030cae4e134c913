"""Core domain logic for the groupsplit partitioner.

This package contains zero external dependencies and represents
the pure partitioning logic of the application. Test loading, file
discovery and artifact writing are handled by the adapters package.
"""

from .errors import ConfigurationError, DiscoveryError, SplitError
from .models import (
    DEPENDENCY_SCOPES,
    DependencyAnnotation,
    DependentSet,
    FileEntry,
    Group,
    GroupCollection,
    LoadedTest,
    ParametrizedRecord,
    SplitConfig,
    SplitResult,
    TestRecord,
)

__all__ = [
    "DEPENDENCY_SCOPES",
    "ConfigurationError",
    "DependencyAnnotation",
    "DependentSet",
    "DiscoveryError",
    "FileEntry",
    "Group",
    "GroupCollection",
    "LoadedTest",
    "ParametrizedRecord",
    "SplitConfig",
    "SplitError",
    "SplitResult",
    "TestRecord",
]
