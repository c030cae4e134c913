"""Unit tests for core domain models."""

from pathlib import Path

import pytest

from groupsplit.core.errors import ConfigurationError
from groupsplit.core.models import (
    DependencyAnnotation,
    DependentSet,
    Group,
    GroupCollection,
    SplitConfig,
    TestRecord,
    resolve_locations,
    suite_label_for,
)


class TestTestRecord:
    """TestRecord identity and dependency qualification."""

    def test_declaring_unit_for_function_and_method(self) -> None:
        function = TestRecord(
            name="tests/test_a.py::test_x",
            signature="tests/test_a.py::test_x",
            module="tests/test_a.py",
            method="test_x",
        )
        method = TestRecord(
            name="tests/test_a.py::TestA::test_y",
            signature="tests/test_a.py::TestA::test_y",
            module="tests/test_a.py",
            test_class="TestA",
            method="test_y",
        )

        assert function.declaring_unit == "tests/test_a.py"
        assert method.declaring_unit == "tests/test_a.py::TestA"

    def test_dependency_signatures_qualified_with_module(self) -> None:
        record = TestRecord(
            name="tests/test_a.py::test_z",
            signature="tests/test_a.py::test_z",
            module="tests/test_a.py",
            method="test_z",
        ).with_dependencies(["test_x", "TestA::test_y", "tests/test_b.py::test_w"])

        assert record.is_dependent
        assert record.dependency_signatures() == [
            "tests/test_a.py::test_x",
            "tests/test_a.py::TestA::test_y",
            "tests/test_b.py::test_w",
        ]

    def test_class_scope_qualifies_with_class(self) -> None:
        record = TestRecord(
            name="tests/test_a.py::TestA::test_z",
            signature="tests/test_a.py::TestA::test_z",
            module="tests/test_a.py",
            test_class="TestA",
            method="test_z",
        ).with_dependencies(["test_y", "tests/test_b.py::test_w"], scope="class")

        assert record.dependency_scope == "class"
        assert record.dependency_signatures() == [
            "tests/test_a.py::TestA::test_y",
            "tests/test_b.py::test_w",
        ]

    def test_session_scope_references_are_node_ids(self) -> None:
        record = TestRecord(
            name="tests/test_a.py::test_z",
            signature="tests/test_a.py::test_z",
            module="tests/test_a.py",
            method="test_z",
        ).with_dependencies(["tests/test_b.py::test_w"], scope="session")

        assert record.dependency_signatures() == ["tests/test_b.py::test_w"]

    def test_scope_owner(self) -> None:
        record = TestRecord(
            name="tests/unit/test_a.py::TestA::test_z",
            signature="tests/unit/test_a.py::TestA::test_z",
            module="tests/unit/test_a.py",
            test_class="TestA",
            method="test_z",
        )

        assert record.scope_owner("session") == ""
        assert record.scope_owner("package") == "tests/unit"
        assert record.scope_owner("module") == "tests/unit/test_a.py"
        assert record.scope_owner("class") == "tests/unit/test_a.py::TestA"

    def test_unknown_scope_rejected(self) -> None:
        with pytest.raises(ValueError, match="scope"):
            TestRecord(
                name="m.py::t",
                signature="m.py::t",
                module="m.py",
                method="t",
                dependency_scope="global",
            )

    def test_annotation_truthiness(self) -> None:
        assert not DependencyAnnotation()
        assert DependencyAnnotation(depends=("test_a",))
        assert DependencyAnnotation(name="login")
        assert DependencyAnnotation(scope="session")

    def test_with_dependencies_returns_copy(self) -> None:
        record = TestRecord(name="m.py::t", signature="m.py::t", module="m.py", method="t")

        updated = record.with_dependencies(["u"])

        assert record.dependencies == ()
        assert updated.dependencies == ("u",)

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="name"):
            TestRecord(name=" ", signature="m.py::t", module="m.py", method="t")


class TestDependentSet:
    """DependentSet keeps first insertion order without duplicates."""

    def test_add_reports_new_names(self) -> None:
        dependent = DependentSet()

        assert dependent.add("b") is True
        assert dependent.add("a") is True
        assert dependent.add("b") is False
        assert dependent.names() == ["b", "a"]
        assert "a" in dependent
        assert len(dependent) == 2

    def test_initial_names_deduplicated(self) -> None:
        assert list(DependentSet(["x", "y", "x"])) == ["x", "y"]


class TestGroupCollection:
    """GroupCollection assignment and replacement semantics."""

    def test_assign_preserves_insertion_order(self) -> None:
        groups = GroupCollection()
        groups.assign(2, "a")
        groups.assign(1, "b")
        groups.assign(2, "c")

        assert groups.indices() == [2, 1]
        assert groups.get(2).members == ["a", "c"]
        assert groups.identifiers() == ["a", "c", "b"]

    def test_replace_overwrites_in_place(self) -> None:
        groups = GroupCollection()
        groups.assign(1, "a")
        groups.assign(2, "b")

        displaced = groups.replace(1, ["x", "y"])

        assert displaced == ["a"]
        assert groups.indices() == [1, 2]
        assert groups.get(1).members == ["x", "y"]
        assert groups.displaced == ["a"]

    def test_replace_new_index_appends(self) -> None:
        groups = GroupCollection()
        groups.assign(1, "a")

        assert groups.replace(3, ["x"]) == []
        assert groups.indices() == [1, 3]
        assert groups.displaced == []

    def test_group_index_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            Group(0)


class TestLocations:
    """Suite labels and location expansion."""

    @pytest.mark.parametrize(
        "location,label",
        [
            ("tests", None),
            ("tests/", None),
            ("/tests", None),
            ("tests/unit", "unit"),
            ("tests/unit/", "unit"),
            ("project/tests/acceptance", "acceptance"),
        ],
    )
    def test_suite_label(self, location: str, label: str | None) -> None:
        assert suite_label_for(location) == label

    def test_resolve_locations_with_suites(self) -> None:
        assert resolve_locations("tests", "unit,,api") == ("tests/unit", "tests/api")

    def test_resolve_locations_without_suites(self) -> None:
        assert resolve_locations("tests") == ("tests",)
        assert resolve_locations("tests", " , ") == ("tests",)


class TestSplitConfig:
    """SplitConfig validation."""

    @pytest.mark.parametrize("num_groups", [0, -1])
    def test_non_positive_group_count_rejected(self, num_groups: int) -> None:
        with pytest.raises(ConfigurationError, match="positive"):
            SplitConfig(num_groups=num_groups)

    def test_boolean_group_count_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="integer"):
            SplitConfig(num_groups=True)

    def test_empty_locations_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="location"):
            SplitConfig(num_groups=2, locations=())

    def test_fields_normalized(self) -> None:
        config = SplitConfig(
            num_groups=2,
            locations=["tests/unit"],  # type: ignore[arg-type]
            project_root="/srv/app",  # type: ignore[arg-type]
        )

        assert config.locations == ("tests/unit",)
        assert config.project_root == Path("/srv/app")
