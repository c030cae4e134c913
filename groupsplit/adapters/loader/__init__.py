"""Test loader and annotation reader adapters."""

from .annotations import DependencyMarkerReader
from .modules import ModuleCache
from .pytest_ast import PytestModuleLoader

__all__ = ["DependencyMarkerReader", "ModuleCache", "PytestModuleLoader"]
