"""Dependency clustering for test records.

Collects every test that depends on another test, or is depended upon,
into a single DependentSet so the whole cluster can be scheduled on one
worker.

References follow the pytest-dependency conventions: they are relative
to the declaring record's scope (module by default, or class, package or
session), may name a single parametrized case (``test_b[1]``), and may
use the alias a test declares with ``name=``.
"""

import logging
from collections.abc import Sequence

from .errors import DiscoveryError
from .models import DEPENDENCY_SCOPES, DependentSet, TestRecord
from .ports import AnnotationReaderPort

logger = logging.getLogger(__name__)


def _strip_case_id(node_id: str) -> str:
    """``mod.py::test_b[1]`` → ``mod.py::test_b``."""
    if node_id.endswith("]") and "[" in node_id:
        return node_id[: node_id.index("[")]
    return node_id


class SignatureIndex:
    """Maps dependency references to records, built once per run.

    Every record is reachable by its signature, by its full name and, when
    it declares one, by its alias in each scope. When several records share
    a key (parametrized cases of the same test) the first one in input
    order wins.
    """

    def __init__(self, records: Sequence[TestRecord]):
        self._by_id: dict[str, TestRecord] = {}
        self._aliases: dict[tuple[str, str, str], TestRecord] = {}
        self._signatures: set[str] = set()
        for record in records:
            self._signatures.add(record.signature)
            self._by_id.setdefault(record.signature, record)
            self._by_id.setdefault(record.name, record)
            if record.dependency_name:
                for scope in DEPENDENCY_SCOPES:
                    key = (scope, record.scope_owner(scope), record.dependency_name)
                    self._aliases.setdefault(key, record)

    def resolve(self, signature: str) -> TestRecord | None:
        """Look a record up by signature or full name."""
        return self._by_id.get(signature)

    def resolve_reference(self, record: TestRecord, reference: str) -> TestRecord | None:
        """Resolve one raw dependency reference declared on ``record``.

        Aliases are tried first, then the qualified node id, then the node
        id without its case suffix so a reference to any case reaches the
        record that stands for the parametrized test.
        """
        scope = record.dependency_scope
        target = self._aliases.get((scope, record.scope_owner(scope), reference))
        if target is not None:
            return target

        node_id = record.qualify(reference)
        target = self.resolve(node_id)
        if target is None:
            target = self.resolve(_strip_case_id(node_id))
        return target

    def __len__(self) -> int:
        return len(self._signatures)


def annotate(
    records: Sequence[TestRecord],
    reader: AnnotationReaderPort | None,
) -> list[TestRecord]:
    """Populate dependency declarations from the annotation reader.

    Records that do not support dependencies, or any record when no reader
    is configured, are returned unchanged.
    """
    if reader is None:
        return list(records)

    annotated = []
    for record in records:
        if record.supports_dependencies:
            annotation = reader.annotation_for(record.declaring_unit, record.method)
            if annotation:
                record = record.with_dependencies(
                    annotation.depends, scope=annotation.scope, name=annotation.name
                )
        annotated.append(record)
    return annotated


def collect_dependent_set(records: Sequence[TestRecord]) -> DependentSet:
    """Build the set of dependent and depended-upon test names.

    For each record with dependencies, its own name is added first and then
    the name of every record it depends on, in declaration order.

    Raises:
        DiscoveryError: If a dependency does not match any loaded record.
    """
    index = SignatureIndex(records)
    dependent = DependentSet()

    for record in records:
        if not record.supports_dependencies or not record.is_dependent:
            continue
        dependent.add(record.name)
        for reference in record.dependencies:
            target = index.resolve_reference(record, reference)
            if target is None:
                raise DiscoveryError(
                    f"{record.name} depends on {record.qualify(reference)} "
                    f"({record.dependency_scope} scope), which was not found "
                    f"among the loaded tests"
                )
            dependent.add(target.name)

    if dependent:
        logger.debug(f"Dependent tests: {', '.join(dependent)}")
    return dependent


__all__ = ["SignatureIndex", "annotate", "collect_dependent_set"]
