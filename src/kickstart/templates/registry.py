"""Template registry: identifier to metadata lookup."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator
from pathlib import Path

from kickstart.errors import UnknownTemplateError
from kickstart.templates.base import TemplateConfig
from kickstart.templates.catalog import BUILTIN_TEMPLATES, TEMPLATE_IDS


def get_package_templates_path() -> Path:
    """Get path to the package-bundled template file trees."""
    return Path(__file__).parent / "files"


def template_source_path(template_id: str, root: Path | None = None) -> Path:
    """Return the directory holding a template's file tree."""
    return (root or get_package_templates_path()) / template_id


class TemplateRegistry:
    """Read-only catalog of templates, keyed by identifier.

    A registry is built once per run and never changes afterwards. Only
    identifiers from ``TEMPLATE_IDS`` are accepted.
    """

    def __init__(self, templates: Iterable[TemplateConfig]) -> None:
        entries: dict[str, TemplateConfig] = {}
        for template in templates:
            if template.id not in TEMPLATE_IDS:
                raise ValueError(f"Template id not in the supported set: {template.id}")
            if not template.features:
                raise ValueError(f"Template {template.id} must declare features")
            entries[template.id] = template
        self._templates = entries

    def get(self, template_id: str) -> TemplateConfig:
        """Return the template for ``template_id``.

        Raises:
            UnknownTemplateError: If the identifier is not registered.
        """
        try:
            return self._templates[template_id]
        except KeyError:
            raise UnknownTemplateError(template_id, self.ids()) from None

    def list(self) -> list[TemplateConfig]:
        """Return all templates in catalog order."""
        return list(self._templates.values())

    def ids(self) -> tuple[str, ...]:
        return tuple(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def __iter__(self) -> Iterator[TemplateConfig]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)


def default_registry(templates_root: Path | None = None) -> TemplateRegistry:
    """Build a fresh registry of the built-in templates.

    Each template's ``source`` points at its bundled file tree under
    ``templates_root`` (defaults to the package's ``files/`` directory).
    """
    return TemplateRegistry(
        dataclasses.replace(t, source=template_source_path(t.id, templates_root))
        for t in BUILTIN_TEMPLATES
    )
