"""Fake AnnotationReaderPort implementation for testing."""

from groupsplit.core.models import DependencyAnnotation
from groupsplit.core.ports import AnnotationReaderPort


class FakeAnnotationReaderPort(AnnotationReaderPort):
    """Canned dependency annotations keyed by ``(declaring_unit, method)``.

    ``annotations`` holds plain module-scoped reference lists;
    ``declarations`` holds full DependencyAnnotation objects with scope
    and alias and takes precedence.
    """

    def __init__(
        self,
        annotations: dict[tuple[str, str], list[str]] | None = None,
        declarations: dict[tuple[str, str], DependencyAnnotation] | None = None,
    ):
        self.annotations = dict(annotations or {})
        self.declarations = dict(declarations or {})
        self.calls: list[tuple[str, str]] = []

    def dependencies_for(self, declaring_unit: str, method: str) -> list[str]:
        self.calls.append((declaring_unit, method))
        return list(self.annotations.get((declaring_unit, method), []))

    def annotation_for(self, declaring_unit: str, method: str) -> DependencyAnnotation:
        declaration = self.declarations.get((declaring_unit, method))
        if declaration is None:
            return super().annotation_for(declaring_unit, method)
        self.calls.append((declaring_unit, method))
        return declaration
