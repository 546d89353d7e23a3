"""Project template catalog and lookup."""

from kickstart.templates.base import TemplateConfig
from kickstart.templates.catalog import BUILTIN_TEMPLATES, TEMPLATE_IDS
from kickstart.templates.registry import (
    TemplateRegistry,
    default_registry,
    get_package_templates_path,
    template_source_path,
)

__all__ = [
    "BUILTIN_TEMPLATES",
    "TEMPLATE_IDS",
    "TemplateConfig",
    "TemplateRegistry",
    "default_registry",
    "get_package_templates_path",
    "template_source_path",
]
