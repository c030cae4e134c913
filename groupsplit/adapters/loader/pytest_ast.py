"""Static pytest test loader.

Implements TestLoaderPort by parsing pytest modules with ``ast`` instead
of importing them, so splitting does not need the project's own
dependencies installed. Collection follows pytest's defaults:

- module-level functions whose name starts with ``test``
- methods starting with ``test`` on classes whose name starts with ``Test``

Tests decorated with ``pytest.mark.parametrize`` are returned as a
ParametrizedRecord holding one record per generated case. Case ids are
derived from literal argument values the way pytest derives them; when
the values are not literals the test is returned as a single record
named by its function node id, which pytest also accepts.
"""

import ast
import itertools
import logging
from collections import Counter
from pathlib import Path
from typing import Any

from groupsplit.core.models import LoadedTest, ParametrizedRecord, TestRecord
from groupsplit.core.ports import FileDiscoveryPort, TestLoaderPort

from .modules import ModuleCache, keyword_value, marker_calls

logger = logging.getLogger(__name__)

DEFAULT_MODULE_PATTERNS: tuple[str, ...] = ("test_*.py", "*_test.py")


def module_patterns(patterns: tuple[str, ...]) -> tuple[str, ...]:
    """The Python module patterns among ``patterns``.

    Falls back to DEFAULT_MODULE_PATTERNS when none of them names a
    ``.py`` file.
    """
    selected = tuple(pattern for pattern in patterns if pattern.endswith(".py"))
    return selected or DEFAULT_MODULE_PATTERNS


_PRIMITIVES = (str, bytes, int, float, complex, bool, type(None))


class _NotLiteral(Exception):
    """Parametrize arguments that cannot be evaluated statically."""


def _value_id(value: Any, argname: str, idx: int) -> str:
    if isinstance(value, bytes):
        return value.decode("ascii", "backslashreplace")
    if isinstance(value, str):
        return value.encode("unicode_escape").decode("ascii")
    if isinstance(value, _PRIMITIVES):
        return str(value)
    return f"{argname}{idx}"


def _call_name(call: ast.Call) -> str:
    """Last component of a call's dotted name (``pytest.param`` → ``param``)."""
    func = call.func
    if isinstance(func, ast.Attribute):
        return func.attr
    if isinstance(func, ast.Name):
        return func.id
    return ""


def _argnames(node: ast.expr) -> list[str]:
    value = ast.literal_eval(node)
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return [str(name) for name in value]


def _case_ids(call: ast.Call) -> list[str]:
    """Ids pytest generates for one ``parametrize`` decorator."""
    if len(call.args) < 2:
        raise _NotLiteral("parametrize needs argnames and argvalues")
    try:
        argnames = _argnames(call.args[0])
    except (ValueError, TypeError, SyntaxError) as e:
        raise _NotLiteral(str(e)) from e

    argvalues = call.args[1]
    if not isinstance(argvalues, (ast.List, ast.Tuple)) or not argvalues.elts:
        raise _NotLiteral("argvalues is not a literal sequence")

    explicit_ids: list[Any] | None = None
    ids_node = keyword_value(call, "ids")
    if ids_node is not None:
        try:
            explicit_ids = list(ast.literal_eval(ids_node))
        except (ValueError, TypeError, SyntaxError) as e:
            raise _NotLiteral("ids is not a literal sequence") from e

    ids = []
    for idx, element in enumerate(argvalues.elts):
        case_id = None
        if isinstance(element, ast.Call) and _call_name(element) == "param":
            id_node = keyword_value(element, "id")
            if id_node is not None:
                try:
                    case_id = str(ast.literal_eval(id_node))
                except (ValueError, TypeError, SyntaxError) as e:
                    raise _NotLiteral("param id is not a literal") from e
            values_nodes = list(element.args)
        elif len(argnames) == 1:
            values_nodes = [element]
        elif isinstance(element, (ast.Tuple, ast.List)):
            values_nodes = list(element.elts)
        else:
            raise _NotLiteral("argvalue is not a literal tuple")

        if case_id is None and explicit_ids is not None and idx < len(explicit_ids):
            if explicit_ids[idx] is not None:
                case_id = str(explicit_ids[idx])

        if case_id is None:
            parts = []
            for argname, value_node in zip(argnames, values_nodes):
                try:
                    value = ast.literal_eval(value_node)
                except (ValueError, TypeError, SyntaxError):
                    value = object()
                parts.append(_value_id(value, argname, idx))
            case_id = "-".join(parts)
        ids.append(case_id)
    return ids


def _disambiguate(ids: list[str]) -> list[str]:
    """Make duplicate ids unique by suffixing an occurrence counter."""
    counts = Counter(ids)
    seen: Counter[str] = Counter()
    unique = []
    for case_id in ids:
        if counts[case_id] > 1:
            suffix = "_" if case_id and case_id[-1].isdigit() else ""
            unique.append(f"{case_id}{suffix}{seen[case_id]}")
            seen[case_id] += 1
        else:
            unique.append(case_id)
    return unique


def parametrize_ids(node: ast.FunctionDef | ast.AsyncFunctionDef) -> list[str] | None:
    """Case ids for a test, or None if it is not (statically) parametrized.

    Stacked decorators multiply: the decorator closest to the function
    varies slowest and its id comes first, as in pytest.
    """
    calls = marker_calls(node, "parametrize")
    if not calls:
        return None
    try:
        per_decorator = [_case_ids(call) for call in reversed(calls)]
    except _NotLiteral as e:
        logger.debug(f"Treating {node.name} as a single test: {e}")
        return None
    combined = ["-".join(parts) for parts in itertools.product(*per_decorator)]
    return _disambiguate(combined)


def _is_test_function(node: ast.stmt) -> bool:
    return isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.name.startswith("test")


class PytestModuleLoader(TestLoaderPort):
    """Loads pytest tests from the modules found under a location."""

    def __init__(
        self,
        project_root: Path,
        discovery: FileDiscoveryPort,
        exclude: str = ".venv",
        patterns: tuple[str, ...] = DEFAULT_MODULE_PATTERNS,
        modules: ModuleCache | None = None,
    ):
        """Initialize the loader.

        Args:
            project_root: Directory node ids are relative to.
            discovery: Used to find test modules under a location.
            exclude: Directory excluded from module discovery.
            patterns: Module filename patterns.
            modules: Parsed-module cache, shared with the annotation reader
                so each module is parsed once.
        """
        self.project_root = Path(project_root)
        self.discovery = discovery
        self.exclude = exclude
        self.patterns = patterns
        self.modules = modules if modules is not None else ModuleCache(self.project_root)

    def load(self, location: str) -> list[LoadedTest]:
        entries = self.discovery.find(
            root=self.project_root,
            path_filter=location,
            exclude=self.exclude,
            patterns=self.patterns,
        )
        tests: list[LoadedTest] = []
        for entry in entries:
            tests.extend(self.load_module(entry.relative_path))
        return tests

    def load_module(self, module: str) -> list[LoadedTest]:
        """Collect the tests of one module, in source order."""
        tree = self.modules.get(module)
        tests: list[LoadedTest] = []
        for node in tree.body:
            if _is_test_function(node):
                tests.append(self._build(module, None, node))
            elif isinstance(node, ast.ClassDef) and node.name.startswith("Test"):
                for item in node.body:
                    if _is_test_function(item):
                        tests.append(self._build(module, node.name, item))
        return tests

    @staticmethod
    def _build(
        module: str,
        test_class: str | None,
        node: ast.FunctionDef | ast.AsyncFunctionDef,
    ) -> LoadedTest:
        if test_class:
            signature = f"{module}::{test_class}::{node.name}"
        else:
            signature = f"{module}::{node.name}"

        ids = parametrize_ids(node)
        if ids is None:
            return TestRecord(
                name=signature,
                signature=signature,
                module=module,
                test_class=test_class,
                method=node.name,
            )
        return ParametrizedRecord(
            signature=signature,
            cases=tuple(
                TestRecord(
                    name=f"{signature}[{case_id}]",
                    signature=signature,
                    module=module,
                    test_class=test_class,
                    method=node.name,
                )
                for case_id in ids
            ),
        )


__all__ = ["DEFAULT_MODULE_PATTERNS", "PytestModuleLoader", "module_patterns", "parametrize_ids"]
