"""Shared helpers for reading pytest modules without importing them."""

import ast
from pathlib import Path

from groupsplit.core.errors import DiscoveryError


def decorator_name(node: ast.expr) -> str:
    """Dotted name of a decorator, ignoring any call arguments.

    ``@pytest.mark.parametrize(...)`` → ``pytest.mark.parametrize``.
    """
    if isinstance(node, ast.Call):
        node = node.func
    parts = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if isinstance(node, ast.Name):
        parts.append(node.id)
    return ".".join(reversed(parts))


def marker_calls(node: ast.FunctionDef | ast.AsyncFunctionDef, marker: str) -> list[ast.Call]:
    """Decorator calls on ``node`` whose name ends with ``marker``, top to bottom."""
    calls = []
    for decorator in node.decorator_list:
        if not isinstance(decorator, ast.Call):
            continue
        name = decorator_name(decorator)
        if name == marker or name.endswith(f".{marker}"):
            calls.append(decorator)
    return calls


def keyword_value(call: ast.Call, keyword: str) -> ast.expr | None:
    for item in call.keywords:
        if item.arg == keyword:
            return item.value
    return None


class ModuleCache:
    """Parses each module once per run.

    Modules are addressed by their path relative to the project root, the
    same form used in test node ids.
    """

    def __init__(self, project_root: Path):
        self.project_root = Path(project_root)
        self._trees: dict[str, ast.Module] = {}

    def get(self, module: str) -> ast.Module:
        """Return the parsed AST for ``module``.

        Raises:
            DiscoveryError: If the module cannot be read or does not parse.
        """
        tree = self._trees.get(module)
        if tree is not None:
            return tree

        path = self.project_root / module
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as e:
            raise DiscoveryError(f"Failed to read test module {module}: {e}") from e
        try:
            tree = ast.parse(source, filename=str(path))
        except SyntaxError as e:
            raise DiscoveryError(f"Failed to parse test module {module}: {e}") from e

        self._trees[module] = tree
        return tree

    def __len__(self) -> int:
        return len(self._trees)


__all__ = ["ModuleCache", "decorator_name", "keyword_value", "marker_calls"]
