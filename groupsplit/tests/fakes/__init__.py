"""Fake/mock implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without touching the filesystem:

- FakeTestLoaderPort: Canned test records per location
- FakeAnnotationReaderPort: Canned dependency annotations
- FakeFileDiscoveryPort: Canned file entries per location
- FakeGroupWriterPort: Captured group collections for assertion
"""

from .annotations import FakeAnnotationReaderPort
from .discovery import FakeFileDiscoveryPort
from .loader import FakeTestLoaderPort
from .writer import FakeGroupWriterPort

__all__ = [
    "FakeAnnotationReaderPort",
    "FakeFileDiscoveryPort",
    "FakeGroupWriterPort",
    "FakeTestLoaderPort",
]
