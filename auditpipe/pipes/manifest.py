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

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"

# Directories never searched for a project manifest.
IGNORED_DIRECTORIES = (".git", "node_modules")

UNKNOWN = "Unknown"

NO_MANIFEST_SBOM = {"error": "No package.json found in repository"}


def get_subdirectories(location):
    """Return the sorted list of sub-directories of the ``location`` directory."""
    try:
        entries = sorted(Path(location).iterdir())
    except OSError as error:
        logger.error(f"Cannot list the {location} directory: {error}")
        return []

    return [
        entry
        for entry in entries
        if entry.is_dir() and entry.name not in IGNORED_DIRECTORIES
    ]


def locate_manifest(root_dir):
    """
    Return the path of the dependency manifest found in the ``root_dir``
    directory or None.

    The root directory is searched first, then each immediate sub-directory and
    finally each sub-sub-directory. The search is limited to two levels of nesting
    to cap the cost on large monorepos.
    """
    root_dir = Path(root_dir)
    directories = [root_dir]

    for _ in range(3):
        for directory in directories:
            manifest_location = directory / MANIFEST_FILENAME
            if manifest_location.is_file():
                return manifest_location

        directories = [
            subdirectory
            for directory in directories
            for subdirectory in get_subdirectories(directory)
        ]


def normalize_license(value):
    """
    Return the declared license ``value`` as a single string.

    The license metadata is found in multiple shapes:
    - a string: "MIT"
    - a structured object: {"type": "MIT", "url": "..."}
    - a list of strings or objects, the legacy "licenses" format
    """
    if isinstance(value, str):
        return value.strip() or UNKNOWN

    if isinstance(value, dict):
        return normalize_license(value.get("type"))

    if isinstance(value, (list, tuple)):
        licenses = [normalize_license(entry) for entry in value]
        return ", ".join(licenses) or UNKNOWN

    return UNKNOWN


def get_declared_license(manifest_data):
    """Return the declared license string from the ``manifest_data`` mapping."""
    if manifest_data.get("license"):
        return normalize_license(manifest_data["license"])
    return normalize_license(manifest_data.get("licenses"))


def load_manifest(manifest_location):
    """
    Return the ``manifest_location`` content as a mapping.
    Raise a ValueError if the content is not a JSON object.
    """
    with open(manifest_location, encoding="utf-8") as f:
        manifest_data = json.load(f)

    if not isinstance(manifest_data, dict):
        raise ValueError(f"{manifest_location} does not contain a JSON object.")

    return manifest_data


def get_dependencies(manifest_data, key):
    """Return the ``key`` dependencies of ``manifest_data`` as a name->range dict."""
    dependencies = manifest_data.get(key) or {}
    if not isinstance(dependencies, dict):
        return {}
    return {name: str(version_range) for name, version_range in dependencies.items()}


def extract_sbom(manifest_location, root_dir):
    """
    Return the software bill of materials of the project declared in the
    ``manifest_location`` file as a mapping.

    Failures are never raised, an ``{"error": ...}`` mapping is returned instead,
    as a partial report is preferable to a failed analysis.
    """
    if not manifest_location:
        logger.warning(f"No {MANIFEST_FILENAME} found in {root_dir}")
        return dict(NO_MANIFEST_SBOM)

    try:
        manifest_data = load_manifest(manifest_location)
    except (OSError, ValueError) as error:
        logger.warning(f"SBOM generation failed for {manifest_location}: {error}")
        return {"error": "SBOM generation failed", "details": str(error)}

    return {
        "projectName": manifest_data.get("name") or UNKNOWN,
        "version": manifest_data.get("version") or UNKNOWN,
        "dependencies": get_dependencies(manifest_data, "dependencies"),
        "devDependencies": get_dependencies(manifest_data, "devDependencies"),
        "license": get_declared_license(manifest_data),
        "foundAt": os.path.relpath(manifest_location, root_dir),
    }
