# SPDX-License-Identifier: Apache-2.0
#
# The RepoAudit software is licensed under the Apache License version 2.0.
# Data generated with RepoAudit is provided as-is without warranties.
#
# You may not use this software except in compliance with the License.
# You may obtain a copy of the License at: http://apache.org/licenses/LICENSE-2.0
# Unless required by applicable law or agreed to in writing, software distributed
# under the License is distributed on an "AS IS" BASIS, WITHOUT WARRANTIES OR
# CONDITIONS OF ANY KIND, either express or implied. See the License for the
# specific language governing permissions and limitations under the License.
#
# Data Generated with RepoAudit is provided on an "AS IS" BASIS, WITHOUT WARRANTIES
# OR CONDITIONS OF ANY KIND, either express or implied. No content created from
# RepoAudit should be considered or used as legal advice. Consult an Attorney
# for any legal advice.
#
# RepoAudit is a dependency license auditing tool for source repositories.

import logging
import tempfile
from collections import namedtuple
from pathlib import Path
from urllib.parse import urlparse

from django.conf import settings

import git

from auditpipe.pipes import truncate_output
from auditpipe.pipes.install import InstallDegradation
from auditpipe.pipes.install import install_dependencies
from auditpipe.pipes.manifest import locate_manifest

logger = logging.getLogger("auditpipe.pipes")

DEFAULT_REPOSITORY_NAME = "repository"

SUPPORTED_SCHEMES = ("http", "https")

Workspace = namedtuple("Workspace", "uri directory path manifest_location install")


class AcquisitionError(Exception):
    """The repository could not be acquired in a workspace."""


def validate_repo_url(url):
    """Raise an ``AcquisitionError`` if the provided ``url`` cannot be cloned."""
    if not url or not isinstance(url, str):
        raise AcquisitionError("A repository URL is required.")

    if url.startswith("git@"):
        raise AcquisitionError(
            "SSH 'git@' URLs are not supported. Use https:// instead."
        )

    # Not using `urlparse(url).scheme` for the scheme as it converts to lower case.
    scheme = url.split("://")[0] if "://" in url else ""
    if scheme not in SUPPORTED_SCHEMES:
        error_msg = f"URL scheme '{scheme}' is not supported."
        if scheme.lower() in SUPPORTED_SCHEMES:
            error_msg += f" Did you mean: '{scheme.lower()}'?"
        raise AcquisitionError(error_msg)

    if not urlparse(url).netloc:
        raise AcquisitionError(f"Invalid repository URL: {url}")


def get_repository_name(url):
    """
    Return the directory name for the clone of the repository ``url``: the last
    segment of the URL path without the ".git" suffix.
    """
    path_segments = [segment for segment in urlparse(url).path.split("/") if segment]

    if len(path_segments) < 2:
        logger.warning(f"Could not extract repository name from URL: {url}")
        return DEFAULT_REPOSITORY_NAME

    name = path_segments[-1]
    if name.endswith(".git"):
        name = name[: -len(".git")]

    return name or DEFAULT_REPOSITORY_NAME


def clone_repository(url, to_path, timeout=None):
    """
    Shallow clone the git repository ``url`` in ``to_path``.
    The git process is killed after ``timeout`` seconds.
    """
    if timeout is None:
        timeout = settings.REPOAUDIT_CLONE_TIMEOUT

    # Disable any prompt, especially for credentials
    git_env = {"GIT_TERMINAL_PROMPT": "0"}

    try:
        git.Git(to_path.parent).clone(
            "--depth=1",
            "--",
            url,
            str(to_path),
            env=git_env,
            kill_after_timeout=timeout,
        )
    except git.CommandError as error:
        stderr = truncate_output(str(error.stderr or error).strip())
        raise AcquisitionError(f"Failed to clone repository {url}: {stderr}") from error


def resolve_workspace_path(directory, expected_path):
    """
    Return the path of the cloned repository.
    Fall back to the first directory available in ``directory`` when the clone is
    not located at the ``expected_path``.
    """
    if expected_path.is_dir():
        return expected_path

    logger.warning(f"Repository not found at the expected path: {expected_path}")
    for entry in sorted(Path(directory).iterdir()):
        if entry.is_dir():
            logger.info(f"Found directory {entry}, using it as the repository path")
            return entry

    raise AcquisitionError("Repository directory not found after clone.")


def acquire_repository(url, to=None, clone_timeout=None, install_timeout=None):
    """
    Clone the repository ``url`` in the ``to`` directory (a new temporary directory
    by default), install its dependencies when possible, and return a ``Workspace``.

    Raise an ``AcquisitionError`` if the URL is not valid or the repository cannot
    be cloned. The dependencies install is best-effort: its failure is logged and the
    analysis continues from the manifest data.

    The removal of the ``to`` directory is the responsibility of the caller, in both
    success and failure cases.
    """
    validate_repo_url(url)
    url = url.rstrip("/")

    directory = Path(to or tempfile.mkdtemp())
    expected_path = directory / get_repository_name(url)

    logger.info(f'Cloning "{url}" in {expected_path}')
    clone_repository(url, expected_path, timeout=clone_timeout)
    repository_path = resolve_workspace_path(directory, expected_path)

    install = None
    manifest_location = locate_manifest(repository_path)
    if manifest_location:
        try:
            install = install_dependencies(
                directory=manifest_location.parent,
                timeout=install_timeout,
            )
        except InstallDegradation as error:
            logger.warning(f"Dependencies not installed: {error}")

    return Workspace(
        uri=url,
        directory=directory,
        path=repository_path,
        manifest_location=manifest_location,
        install=install,
    )
