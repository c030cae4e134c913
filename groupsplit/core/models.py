"""Domain models for the groupsplit partitioner.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePosixPath
from typing import TypeAlias

from .errors import ConfigurationError, DiscoveryError

# Scopes of pytest-dependency references, widest first.
DEPENDENCY_SCOPES: tuple[str, ...] = ("session", "package", "module", "class")


@dataclass(frozen=True)
class DependencyAnnotation:
    """Dependency declaration read from a test's annotations.

    ``depends`` holds the references as written; ``scope`` says what they
    are relative to and ``name`` is an optional alias other tests may use
    to refer to this one.
    """

    depends: tuple[str, ...] = ()
    scope: str = "module"
    name: str | None = None

    def __bool__(self) -> bool:
        return bool(self.depends) or self.name is not None or self.scope != "module"


@dataclass(frozen=True)
class TestRecord:
    """A single concrete test produced by a test loader.

    ``name`` is what the downstream runner receives; ``signature`` identifies
    the declaring unit and method and is what dependency references point to.
    For a parametrized case the two differ by the ``[id]`` suffix.
    """

    __test__ = False  # not a pytest test class

    name: str
    signature: str
    module: str
    method: str
    test_class: str | None = None
    dependencies: tuple[str, ...] = ()
    supports_dependencies: bool = True
    dependency_scope: str = "module"
    dependency_name: str | None = None

    def __post_init__(self) -> None:
        """Validate record invariants on creation."""
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        if not self.signature or not self.signature.strip():
            raise ValueError("signature must be a non-empty string")
        if self.dependency_scope not in DEPENDENCY_SCOPES:
            raise ValueError(f"unknown dependency scope: {self.dependency_scope!r}")

    @property
    def declaring_unit(self) -> str:
        """Module, or ``module::Class`` for methods."""
        if self.test_class:
            return f"{self.module}::{self.test_class}"
        return self.module

    @property
    def is_dependent(self) -> bool:
        return bool(self.dependencies)

    def with_dependencies(
        self,
        raw: Iterable[str],
        scope: str = "module",
        name: str | None = None,
    ) -> "TestRecord":
        """Return a copy whose dependency list is populated from annotations."""
        return replace(
            self,
            dependencies=tuple(raw),
            dependency_scope=scope,
            dependency_name=name,
        )

    def scope_owner(self, scope: str) -> str:
        """The unit a reference in ``scope`` is relative to.

        Empty for session scope, the module's directory for package scope.
        Class scope on a module-level function falls back to the module.
        """
        if scope == "session":
            return ""
        if scope == "package":
            return PurePosixPath(self.module).parent.as_posix()
        if scope == "class":
            return self.declaring_unit
        return self.module

    def qualify(self, reference: str) -> str:
        """Turn a raw reference into a node id in this record's scope.

        Session and package references are node ids already. Module
        references (``test_a``, ``TestA::test_a``) get the module prefix and
        class references get the ``module::Class`` prefix, except when they
        already name a module (``pkg/test_x.py::test_a``).
        """
        if self.dependency_scope in ("session", "package") or ".py::" in reference:
            return reference
        if self.dependency_scope == "class":
            return f"{self.declaring_unit}::{reference}"
        return f"{self.module}::{reference}"

    def dependency_signatures(self) -> list[str]:
        """Raw dependency references qualified to node ids."""
        return [self.qualify(reference) for reference in self.dependencies]


@dataclass(frozen=True)
class ParametrizedRecord:
    """Wrapper around the cases a data provider expands one test into."""

    signature: str
    cases: tuple[TestRecord, ...]

    def first(self) -> TestRecord:
        """Return the first concrete case."""
        if not self.cases:
            raise DiscoveryError(f"Parametrized test {self.signature} has no cases")
        return self.cases[0]


LoadedTest: TypeAlias = TestRecord | ParametrizedRecord


def unwrap(test: LoadedTest) -> TestRecord:
    """Reduce a loader entry to the concrete record it stands for."""
    if isinstance(test, ParametrizedRecord):
        return test.first()
    return test


@dataclass(frozen=True)
class FileEntry:
    """A discovered file, identified by its path relative to the project root."""

    relative_path: str


class DependentSet:
    """Insertion-ordered, deduplicated collection of dependent test names."""

    def __init__(self, names: Iterable[str] = ()):
        self._names: dict[str, None] = {}
        for name in names:
            self.add(name)

    def add(self, name: str) -> bool:
        """Insert ``name`` if absent. Returns True when it was new."""
        if name in self._names:
            return False
        self._names[name] = None
        return True

    def names(self) -> list[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __bool__(self) -> bool:
        return bool(self._names)

    def __repr__(self) -> str:
        return f"DependentSet({self.names()!r})"


@dataclass
class Group:
    """A 1-based group index and the identifiers assigned to it, in order."""

    index: int
    members: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError(f"group index must be >= 1, got {self.index}")

    def __len__(self) -> int:
        return len(self.members)


class GroupCollection:
    """Groups built during one pass over the inputs.

    Iteration follows the order in which groups were first opened, which
    is also the order group files are written in.
    """

    def __init__(self, suite_label: str | None = None):
        self.suite_label = suite_label
        self._groups: dict[int, Group] = {}
        self.displaced: list[str] = []

    def assign(self, index: int, identifier: str) -> None:
        """Append ``identifier`` to group ``index``, opening the group if needed."""
        group = self._groups.get(index)
        if group is None:
            group = self._groups[index] = Group(index)
        group.members.append(identifier)

    def replace(self, index: int, identifiers: Iterable[str]) -> list[str]:
        """Set the content of group ``index``, discarding what it held.

        An existing group keeps its position in iteration order. Displaced
        identifiers are also kept in ``displaced``.

        Returns:
            The identifiers that were displaced (empty for a new group).
        """
        previous = self._groups.get(index)
        self._groups[index] = Group(index, list(identifiers))
        if previous is None:
            return []
        self.displaced.extend(previous.members)
        return previous.members

    def get(self, index: int) -> Group | None:
        return self._groups.get(index)

    def indices(self) -> list[int]:
        return list(self._groups)

    def identifiers(self) -> list[str]:
        """All identifiers across groups, in group then assignment order."""
        return [member for group in self._groups.values() for member in group.members]

    def __iter__(self) -> Iterator[Group]:
        return iter(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, index: object) -> bool:
        return index in self._groups

    def __repr__(self) -> str:
        sizes = {index: len(group) for index, group in self._groups.items()}
        return f"GroupCollection(suite_label={self.suite_label!r}, sizes={sizes})"


def suite_label_for(location: str) -> str | None:
    """Derive the suite label of a source location.

    A location with at least two non-empty ``/`` segments is labelled with
    its last segment (``tests/unit`` → ``unit``); shorter locations have no
    label.
    """
    parts = [part for part in location.split("/") if part]
    if len(parts) >= 2:
        return parts[-1]
    return None


def resolve_locations(base_path: str, suites: str = "") -> tuple[str, ...]:
    """Expand a base path and comma-separated suite names into locations.

    ``("tests", "unit,api")`` → ``("tests/unit", "tests/api")``. Empty suite
    entries are ignored; without any suite the base path itself is used.
    """
    names = [suite.strip() for suite in suites.split(",") if suite.strip()]
    if not names:
        return (base_path,)
    return tuple(f"{base_path}/{name}" for name in names)


DEFAULT_FILE_PATTERNS: tuple[str, ...] = ("test_*.py", "*_test.py", "*.feature")


@dataclass(frozen=True)
class SplitConfig:
    """Immutable settings for a single split invocation."""

    num_groups: int
    locations: tuple[str, ...] = ("tests",)
    project_root: Path = Path(".")
    groups_to: str = "tests/_data/group_"
    exclude_path: str = ".venv"
    file_patterns: tuple[str, ...] = DEFAULT_FILE_PATTERNS

    def __post_init__(self) -> None:
        """Validate configuration invariants on creation."""
        if isinstance(self.num_groups, bool) or not isinstance(self.num_groups, int):
            raise ConfigurationError(
                f"num_groups must be an integer, got {self.num_groups!r}"
            )
        if self.num_groups < 1:
            raise ConfigurationError(
                f"num_groups must be a positive integer, got {self.num_groups}"
            )
        if not self.locations:
            raise ConfigurationError("at least one input location is required")
        if not self.groups_to:
            raise ConfigurationError("groups_to output pattern must not be empty")
        object.__setattr__(self, "project_root", Path(self.project_root))
        object.__setattr__(self, "locations", tuple(self.locations))
        object.__setattr__(self, "file_patterns", tuple(self.file_patterns))


@dataclass(frozen=True)
class SplitResult:
    """Summary of a completed split."""

    strategy: str
    input_count: int
    group_count: int
    written: tuple[Path, ...]
    displaced_count: int = 0
