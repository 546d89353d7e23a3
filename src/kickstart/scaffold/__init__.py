"""Scaffold generation from template file trees."""

from kickstart.scaffold.generator import ScaffoldGenerator, ScaffoldResult
from kickstart.scaffold.substitution import build_variables, substitute

__all__ = [
    "ScaffoldGenerator",
    "ScaffoldResult",
    "build_variables",
    "substitute",
]
