"""Base project template definition."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from kickstart.detection.models import Framework


@dataclass(frozen=True)
class TemplateConfig:
    """Declarative metadata for a selectable project template."""

    id: str  # e.g. "nextjs-ecommerce"
    name: str  # display name
    description: str
    framework: str  # human label, e.g. "Next.js 14 (App Router)"
    framework_variant: Framework
    features: tuple[str, ...]
    requires_auth: bool = False
    source: Path | None = None  # directory holding the template's file tree
