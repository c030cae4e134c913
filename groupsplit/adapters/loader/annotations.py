"""Dependency annotation reader for pytest modules.

Implements AnnotationReaderPort by reading ``@pytest.mark.dependency``
markers (the pytest-dependency plugin convention) straight from the
module source:

    @pytest.mark.dependency(name="login")
    def test_login(): ...

    @pytest.mark.dependency(depends=["login", "TestCart::test_add"])
    def test_checkout(): ...

    class TestCart:
        @pytest.mark.dependency(depends=["test_add"], scope="class")
        def test_pay(self): ...

References are returned as written together with their scope and the
test's alias; qualifying them to test names is done by the core.
"""

import ast
import logging
from pathlib import Path
from typing import Any

from groupsplit.core.models import DEPENDENCY_SCOPES, DependencyAnnotation
from groupsplit.core.ports import AnnotationReaderPort

from .modules import ModuleCache, keyword_value, marker_calls

logger = logging.getLogger(__name__)

_UNSET = object()


def _find_test(tree: ast.Module, test_class: str | None, method: str) -> ast.FunctionDef | ast.AsyncFunctionDef | None:
    body = tree.body
    if test_class:
        owner = next(
            (node for node in body if isinstance(node, ast.ClassDef) and node.name == test_class),
            None,
        )
        if owner is None:
            return None
        body = owner.body
    for node in body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name == method:
            return node
    return None


class DependencyMarkerReader(AnnotationReaderPort):
    """Reads ``pytest.mark.dependency`` annotations."""

    def __init__(self, project_root: Path, modules: ModuleCache | None = None):
        self.modules = modules if modules is not None else ModuleCache(Path(project_root))

    def dependencies_for(self, declaring_unit: str, method: str) -> list[str]:
        return list(self.annotation_for(declaring_unit, method).depends)

    def annotation_for(self, declaring_unit: str, method: str) -> DependencyAnnotation:
        module, _, test_class = declaring_unit.partition("::")
        node = _find_test(self.modules.get(module), test_class or None, method)
        if node is None:
            logger.debug(f"No definition of {method} found in {declaring_unit}")
            return DependencyAnnotation()

        test_id = f"{declaring_unit}::{method}"
        depends: list[str] = []
        scope = "module"
        name = None
        for call in marker_calls(node, "dependency"):
            references = self._literal(call, "depends", test_id)
            if isinstance(references, str):
                references = [references]
            if isinstance(references, (list, tuple)):
                depends.extend(str(reference) for reference in references)

            value = self._literal(call, "scope", test_id)
            if value is not _UNSET:
                if value in DEPENDENCY_SCOPES:
                    scope = value
                else:
                    logger.warning(f"Ignoring unknown dependency scope {value!r} on {test_id}")

            value = self._literal(call, "name", test_id)
            if isinstance(value, str) and value:
                name = value
        return DependencyAnnotation(depends=tuple(depends), scope=scope, name=name)

    @staticmethod
    def _literal(call: ast.Call, keyword: str, test_id: str) -> Any:
        node = keyword_value(call, keyword)
        if node is None:
            return _UNSET
        try:
            return ast.literal_eval(node)
        except (ValueError, TypeError, SyntaxError):
            logger.warning(f"Ignoring non-literal {keyword} on {test_id}")
            return _UNSET


__all__ = ["DependencyMarkerReader"]
