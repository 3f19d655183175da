"""
Project scaffolding from the Semaphore npm template.

The template is an ordinary npm package. We ask the registry for the
requested version, download its tarball and unpack it into the new
project directory, dropping the ``package/`` prefix npm puts on every
entry.
"""

from __future__ import annotations

import json
import logging
import shutil
import tarfile
from io import BytesIO
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import requests
from pydantic import BaseModel, Field

from .errors import ProjectExistsError, ScaffoldError

logger = logging.getLogger("semaphore_cli.scaffold")

DEFAULT_TEMPLATE = "@semaphore-protocol/cli-template-hardhat"
DEFAULT_REGISTRY = "https://registry.npmjs.org"


class ScaffoldResult(BaseModel):
    """A freshly created project."""

    path: Path
    version: str
    file_count: int = 0
    scripts: dict[str, str] = Field(default_factory=dict)


class ProjectScaffolder:
    """Create projects from an npm template package.

    Args:
        template_package: npm package name of the template.
        registry: npm registry base URL.
        timeout: Per-request timeout in seconds.
        session: Optional requests session (tests inject a fake one).
    """

    def __init__(
        self,
        template_package: str = DEFAULT_TEMPLATE,
        registry: str = DEFAULT_REGISTRY,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._package = template_package
        self._registry = registry.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def _get(self, url: str) -> requests.Response:
        try:
            resp = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise ScaffoldError(f"could not reach {url}: {exc}") from exc
        if resp.status_code >= 400:
            raise ScaffoldError(f"{url} returned {resp.status_code}")
        return resp

    def resolve(self, version: str = "latest") -> tuple[str, str]:
        """Resolve a version or dist-tag to (exact version, tarball URL).

        Raises:
            ScaffoldError: If the registry does not know the version.
        """
        url = f"{self._registry}/{quote(self._package, safe='@')}/{quote(version, safe='')}"
        resp = self._get(url)
        try:
            meta = resp.json()
            return str(meta["version"]), str(meta["dist"]["tarball"])
        except (ValueError, KeyError, TypeError) as exc:
            raise ScaffoldError(f"unexpected registry response for {self._package}@{version}") from exc

    def extract(self, archive: bytes, target: Path) -> int:
        """Unpack an npm tarball into target, stripping the top directory.

        Returns:
            Number of files written.
        """
        file_count = 0
        try:
            with tarfile.open(fileobj=BytesIO(archive), mode="r:gz") as tar:
                for member in tar.getmembers():
                    if not member.isfile():
                        continue
                    parts = member.name.split("/", 1)
                    if len(parts) < 2 or not parts[1]:
                        continue
                    member.name = parts[1]
                    tar.extract(member, path=target, filter="data")
                    file_count += 1
        except (tarfile.TarError, OSError) as exc:
            raise ScaffoldError(f"could not extract template: {exc}") from exc
        return file_count

    def create(self, project_dir: Path, version: str = "latest") -> ScaffoldResult:
        """Create a new project directory from the template.

        Args:
            project_dir: Directory to create. Must not exist yet.
            version: Template version or dist-tag.

        Returns:
            ScaffoldResult with the npm scripts the template defines.

        Raises:
            ProjectExistsError: If project_dir already exists.
            ScaffoldError: On registry, download or extraction failure.
        """
        if project_dir.exists():
            raise ProjectExistsError(project_dir.name)

        exact_version, tarball_url = self.resolve(version)
        logger.info("Downloading %s@%s from %s", self._package, exact_version, tarball_url)
        archive = self._get(tarball_url).content

        try:
            project_dir.mkdir(parents=True)
        except OSError as exc:
            raise ScaffoldError(f"could not create {project_dir}: {exc}") from exc
        try:
            file_count = self.extract(archive, project_dir)
        except ScaffoldError:
            shutil.rmtree(project_dir, ignore_errors=True)
            raise

        logger.info("Extracted %d files into %s", file_count, project_dir)
        return ScaffoldResult(
            path=project_dir,
            version=exact_version,
            file_count=file_count,
            scripts=read_npm_scripts(project_dir),
        )


def read_npm_scripts(project_dir: Path) -> dict[str, str]:
    """Scripts declared in a project's package.json, or {} if none."""
    package_json = project_dir / "package.json"
    if not package_json.exists():
        return {}
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read %s: %s", package_json, exc)
        return {}
    scripts = data.get("scripts") if isinstance(data, dict) else None
    if not isinstance(scripts, dict):
        return {}
    return {str(k): str(v) for k, v in scripts.items()}
