"""Placeholder substitution for template contents and path names."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kickstart.config.schema import ProjectConfig

# {{PROJECT_NAME}}-style tokens. Lowercase or spaced braces ("{{ color }}")
# are template content, not placeholders, and are left alone.
TOKEN_PATTERN = re.compile(r"\{\{([A-Z][A-Z0-9_]*)\}\}")

API_KEY_PLACEHOLDER = "your-api-key-here"
WEBHOOK_SECRET_PLACEHOLDER = "your-webhook-secret-here"

# Values that must never be written into files meant to be committed.
SECRET_PLACEHOLDERS: dict[str, str] = {
    "API_KEY": API_KEY_PLACEHOLDER,
    "WEBHOOK_SECRET": WEBHOOK_SECRET_PLACEHOLDER,
}


def substitute(text: str, variables: Mapping[str, str]) -> str:
    """Replace known ``{{TOKEN}}`` placeholders; unknown tokens stay intact."""

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in variables:
            return variables[key]
        return match.group(0)

    return TOKEN_PATTERN.sub(_replace, text)


def find_tokens(text: str) -> set[str]:
    """Return the placeholder names used in ``text``."""
    return set(TOKEN_PATTERN.findall(text))


def build_variables(config: ProjectConfig) -> dict[str, str]:
    """Derive the substitution variables from a resolved project config."""
    pm = config.package_manager
    return {
        "PROJECT_NAME": config.name,
        "ENVIRONMENT": config.environment,
        "PACKAGE_MANAGER": pm.name,
        "TEMPLATE": config.template.id,
        "TEMPLATE_NAME": config.template.name,
        "FRAMEWORK": config.template.framework,
        "RUN_DEV": pm.run_command("dev"),
        "RUN_BUILD": pm.run_command("build"),
        "API_KEY": config.api_key or API_KEY_PLACEHOLDER,
        "WEBHOOK_SECRET": config.webhook_secret or WEBHOOK_SECRET_PLACEHOLDER,
    }
