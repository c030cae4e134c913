"""Fake TestLoaderPort implementation for testing."""

from groupsplit.core.errors import DiscoveryError
from groupsplit.core.models import LoadedTest, TestRecord
from groupsplit.core.ports import TestLoaderPort


def make_record(
    name: str,
    depends: tuple[str, ...] = (),
    module: str = "tests/test_sample.py",
    test_class: str | None = None,
    scope: str = "module",
    alias: str | None = None,
) -> TestRecord:
    """Build a record whose name is ``module::name`` (or ``module::Class::name``).

    Dependencies are given as references relative to ``scope``.
    """
    unit = f"{module}::{test_class}" if test_class else module
    node_id = f"{unit}::{name}"
    return TestRecord(
        name=node_id,
        signature=node_id,
        module=module,
        method=name,
        test_class=test_class,
        dependencies=depends,
        dependency_scope=scope,
        dependency_name=alias,
    )


class FakeTestLoaderPort(TestLoaderPort):
    """In-memory test loader for testing.

    Returns the records registered for a location and records every load
    call for assertions.
    """

    def __init__(self, tests: dict[str, list[LoadedTest]] | None = None):
        """Initialize with optional records keyed by location."""
        self.tests: dict[str, list[LoadedTest]] = dict(tests or {})
        self.load_calls: list[str] = []
        self.should_fail: bool = False
        self.fail_message: str = "Loader failed"

    def add_tests(self, location: str, tests: list[LoadedTest]) -> None:
        self.tests.setdefault(location, []).extend(tests)

    def load(self, location: str) -> list[LoadedTest]:
        self.load_calls.append(location)

        if self.should_fail:
            raise DiscoveryError(self.fail_message)

        return list(self.tests.get(location, []))
