"""Template tree materialization.

The generator renders a template into a staging directory created beside
the destination, validates the staged tree, and only then renames it into
place. A failure at any point removes the staging directory, so the
destination either receives the complete scaffold or is left as it was.
"""

from __future__ import annotations

import json
import logging
import os
import secrets
import shutil
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from kickstart.errors import (
    DestinationNotEmptyError,
    KickstartError,
    ScaffoldWriteError,
    TemplateNotFoundError,
)
from kickstart.scaffold.substitution import SECRET_PLACEHOLDERS, substitute
from kickstart.templates.base import TemplateConfig
from kickstart.templates.registry import template_source_path

logger = logging.getLogger(__name__)

# Build output and installed packages never belong in a scaffold.
IGNORED_NAMES: frozenset[str] = frozenset({"node_modules", "dist", ".next"})

# Package registries drop dotfiles, so templates ship these undotted.
RENAMED_FILES: dict[str, str] = {
    "gitignore": ".gitignore",
    "npmrc": ".npmrc",
}

ENV_EXAMPLE = ".env.example"
MANIFEST = "package.json"

DEFAULT_ENV_CONTENT = """\
# ZendFi Configuration
ZENDFI_API_KEY={{API_KEY}}
ZENDFI_WEBHOOK_SECRET={{WEBHOOK_SECRET}}
ZENDFI_ENVIRONMENT={{ENVIRONMENT}}
"""


@dataclass(frozen=True)
class ScaffoldResult:
    """Outcome of a successful scaffold."""

    path: Path
    files: tuple[str, ...]  # POSIX paths relative to ``path``
    env_file: str | None = None


def is_empty_dir(path: Path) -> bool:
    """Return True if ``path`` is a directory with no entries."""
    return path.is_dir() and next(path.iterdir(), None) is None


def missing_ancestors(path: Path) -> list[Path]:
    """Ancestors of ``path`` that do not exist yet, deepest first."""
    missing: list[Path] = []
    for parent in path.parents:
        if parent.exists():
            break
        missing.append(parent)
    return missing


def remove_empty_dirs(paths: list[Path]) -> None:
    """Remove each directory in order, stopping at the first non-empty one."""
    for path in paths:
        if not is_empty_dir(path):
            return
        try:
            path.rmdir()
        except OSError as e:
            logger.debug("Could not remove %s: %s", path, e)
            return


class ScaffoldGenerator:
    """Copies a template's file tree into a new project directory."""

    def __init__(self, templates_root: Path | None = None) -> None:
        self._templates_root = templates_root

    def source_for(self, template: TemplateConfig) -> Path:
        """Return the template's source tree location."""
        if self._templates_root is not None:
            return template_source_path(template.id, self._templates_root)
        if template.source is not None:
            return template.source
        return template_source_path(template.id)

    def generate(
        self,
        template: TemplateConfig,
        destination: Path,
        variables: Mapping[str, str],
        overwrite: bool = False,
        env_file: str | None = None,
    ) -> ScaffoldResult:
        """Materialize ``template`` at ``destination``.

        Args:
            template: The template to copy.
            destination: Target project directory.
            variables: Values for ``{{TOKEN}}`` placeholders.
            overwrite: Replace a non-empty destination instead of failing.
            env_file: Name of the environment file to write (e.g. ``.env``),
                or None to skip it.

        Raises:
            TemplateNotFoundError: If the template's source tree is missing.
            DestinationNotEmptyError: If the destination has files and
                ``overwrite`` is not set.
            ScaffoldWriteError: If writing, validating or publishing fails.
        """
        source = self.source_for(template)
        if not source.is_dir():
            raise TemplateNotFoundError(template.id, source)

        destination = Path(os.path.abspath(destination.expanduser()))
        self._check_destination(destination, overwrite)

        created_parents = missing_ancestors(destination)
        published = False
        try:
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                staging = Path(
                    tempfile.mkdtemp(
                        prefix=f".{destination.name}.",
                        suffix=".staging",
                        dir=destination.parent,
                    )
                )
            except OSError as e:
                raise ScaffoldWriteError(destination, str(e)) from e

            logger.debug("Staging %s in %s", template.id, staging)
            try:
                files = self._render_tree(source, staging, variables)
                written_env: str | None = None
                if env_file:
                    written_env = self._write_env_file(source, staging, env_file, variables)
                    if written_env not in files:
                        files.append(written_env)
                self._validate(staging, destination, files)
                self._publish(staging, destination)
                published = True
            except KickstartError:
                raise
            except OSError as e:
                raise ScaffoldWriteError(destination, str(e)) from e
            finally:
                if staging.exists():
                    shutil.rmtree(staging, ignore_errors=True)
        finally:
            if not published:
                remove_empty_dirs(created_parents)

        return ScaffoldResult(
            path=destination,
            files=tuple(sorted(files)),
            env_file=written_env,
        )

    def _check_destination(self, destination: Path, overwrite: bool) -> None:
        if not destination.exists():
            return
        if not destination.is_dir():
            raise DestinationNotEmptyError(destination)
        if not overwrite and not is_empty_dir(destination):
            raise DestinationNotEmptyError(destination)

    def _render_tree(
        self, source: Path, staging: Path, variables: Mapping[str, str]
    ) -> list[str]:
        """Render every template file into ``staging``.

        Returns the POSIX relative paths written.
        """
        written: list[str] = []
        for root, dirs, filenames in os.walk(source):
            dirs[:] = sorted(d for d in dirs if d not in IGNORED_NAMES)
            root_path = Path(root)
            rel_dir = root_path.relative_to(source)
            out_dir = staging.joinpath(*self._render_parts(rel_dir.parts, variables))
            out_dir.mkdir(parents=True, exist_ok=True)

            for filename in sorted(filenames):
                if filename in IGNORED_NAMES:
                    continue
                src_file = root_path / filename
                (out_name,) = self._render_parts((filename,), variables)
                out_name = RENAMED_FILES.get(out_name, out_name)
                out_file = out_dir / out_name

                file_vars = variables
                if filename == ENV_EXAMPLE:
                    # The example file gets committed: keep real secrets out.
                    file_vars = {**variables, **SECRET_PLACEHOLDERS}
                self._render_file(src_file, out_file, file_vars)
                written.append(out_file.relative_to(staging).as_posix())
        return written

    @staticmethod
    def _render_parts(
        parts: tuple[str, ...], variables: Mapping[str, str]
    ) -> list[str]:
        rendered: list[str] = []
        for part in parts:
            name = substitute(part, variables)
            if name in ("", ".", "..") or "/" in name or os.sep in name:
                raise OSError(f"placeholder produced an unsafe path component: {part!r}")
            rendered.append(name)
        return rendered

    @staticmethod
    def _render_file(src: Path, dest: Path, variables: Mapping[str, str]) -> None:
        data = src.read_bytes()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            dest.write_bytes(data)  # binary: copied as-is
        else:
            dest.write_text(substitute(text, variables), encoding="utf-8")
        shutil.copymode(src, dest)

    @staticmethod
    def _write_env_file(
        source: Path, staging: Path, env_file: str, variables: Mapping[str, str]
    ) -> str:
        """Write the environment file from ``.env.example`` or the default."""
        example = source / ENV_EXAMPLE
        if example.is_file():
            content = example.read_text(encoding="utf-8")
        else:
            content = DEFAULT_ENV_CONTENT
        target = staging / env_file
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(substitute(content, variables), encoding="utf-8")
        return target.relative_to(staging).as_posix()

    @staticmethod
    def _validate(staging: Path, destination: Path, files: list[str]) -> None:
        """Check every file landed and the manifest still parses."""
        missing = [f for f in files if not (staging / f).is_file()]
        if missing:
            raise ScaffoldWriteError(destination, f"files missing after write: {missing}")

        manifest = staging / MANIFEST
        if manifest.is_file():
            try:
                json.loads(manifest.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise ScaffoldWriteError(
                    destination, f"{MANIFEST} is not valid JSON after substitution: {e}"
                ) from e

    @staticmethod
    def _publish(staging: Path, destination: Path) -> None:
        """Move the staged tree into place.

        An existing destination is moved aside first and restored if the
        final rename fails.
        """
        if not destination.exists():
            staging.rename(destination)
            return

        if is_empty_dir(destination):
            destination.rmdir()
            staging.rename(destination)
            return

        backup = destination.with_name(f".{destination.name}.{secrets.token_hex(4)}.old")
        destination.rename(backup)
        try:
            staging.rename(destination)
        except OSError:
            backup.rename(destination)
            raise
        shutil.rmtree(backup, ignore_errors=True)
