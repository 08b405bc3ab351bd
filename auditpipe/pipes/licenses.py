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
from dataclasses import dataclass
from pathlib import Path

from auditpipe.pipes.manifest import UNKNOWN
from auditpipe.pipes.manifest import get_declared_license
from auditpipe.pipes.manifest import get_dependencies
from auditpipe.pipes.manifest import load_manifest

logger = logging.getLogger(__name__)

NODE_MODULES = "node_modules"

# License of a declared dependency not found in the installed dependencies tree.
NOT_INSTALLED = "Not installed"


class Category:
    ALLOWED = "allowed"
    BANNED = "banned"
    NEEDS_REVIEW = "needs-review"
    UNKNOWN = "unknown"


class ClassificationError(Exception):
    """The license of an installed dependency cannot be read."""


@dataclass(frozen=True)
class LicenseRecord:
    """The license classification of a declared dependency."""

    package: str
    version: str
    license: str
    category: str
    actual_version: str = ""

    @property
    def is_installed(self):
        return self.license != NOT_INSTALLED

    def as_dict(self):
        """Return the data as a serializable dict."""
        data = {
            "package": self.package,
            "version": self.version,
            "license": self.license,
        }
        if self.actual_version:
            data["actualVersion"] = self.actual_version
        return data


def matches_any(license_string, patterns):
    """Return True if any of the ``patterns`` is contained in ``license_string``."""
    license_upper = license_string.upper()
    return any(pattern.upper() in license_upper for pattern in patterns)


def classify_license(license_string, policy_table):
    """
    Return the category of the ``license_string`` according to the
    ``policy_table``.

    The banned patterns are checked first, then the review and the allowed ones.
    A license matching both a banned and an allowed pattern is always banned.

    A compound expression such as "MIT OR GPL-3.0" is matched as a single string,
    this is a known limitation of the substring matching.
    """
    if not license_string:
        return Category.UNKNOWN

    if matches_any(license_string, policy_table.banned):
        return Category.BANNED
    if matches_any(license_string, policy_table.review):
        return Category.NEEDS_REVIEW
    if matches_any(license_string, policy_table.allowed):
        return Category.ALLOWED

    return Category.UNKNOWN


def classify_project_license(license_string, policy_table):
    """Return True if the project ``license_string`` is allowed by the policy."""
    return classify_license(license_string, policy_table) == Category.ALLOWED


def is_valid_package_name(package_name):
    """
    Return True if the ``package_name`` is a "name" or a scoped "@scope/name"
    package name that cannot point outside of the ``node_modules`` directory.
    """
    if not package_name or "\\" in package_name:
        return False

    segments = package_name.split("/")
    if len(segments) > 2 or (len(segments) == 2 and not segments[0].startswith("@")):
        return False

    return all(segment not in ("", ".", "..") for segment in segments)


def get_installed_manifest_location(node_modules, package_name):
    """
    Return the location of the manifest of the ``package_name`` installed package,
    or None if the ``package_name`` is not valid.
    The scoped packages, such as "@scope/name", are installed in nested directories.
    """
    if not is_valid_package_name(package_name):
        return

    return Path(node_modules, *package_name.split("/"), "package.json")


def read_installed_license(manifest_location):
    """
    Return a ``(license, version)`` tuple from the installed package
    ``manifest_location``.
    Raise a ``ClassificationError`` if the manifest cannot be read.
    """
    try:
        manifest_data = load_manifest(manifest_location)
    except (OSError, ValueError) as error:
        raise ClassificationError(f"Cannot read {manifest_location}: {error}")

    version = manifest_data.get("version") or ""
    return get_declared_license(manifest_data), str(version)


def get_all_dependencies(manifest_data):
    """
    Return the union of the runtime and development dependencies.
    A development dependency range takes precedence over the runtime one.
    """
    return {
        **get_dependencies(manifest_data, "dependencies"),
        **get_dependencies(manifest_data, "devDependencies"),
    }


def classify_dependency(node_modules, package_name, version_range, policy_table):
    """Return a ``LicenseRecord`` for the ``package_name`` declared dependency."""
    installed_manifest = get_installed_manifest_location(node_modules, package_name)

    if not installed_manifest:
        logger.warning(f"Invalid dependency name: {package_name}")
        return LicenseRecord(
            package=package_name,
            version=version_range,
            license=NOT_INSTALLED,
            category=Category.UNKNOWN,
        )

    if not installed_manifest.is_file():
        logger.debug(f"Dependency not installed: {package_name}")
        return LicenseRecord(
            package=package_name,
            version=version_range,
            license=NOT_INSTALLED,
            category=Category.UNKNOWN,
        )

    try:
        license_string, actual_version = read_installed_license(installed_manifest)
    except ClassificationError as error:
        logger.warning(f"Failed to analyze {package_name}: {error}")
        return LicenseRecord(
            package=package_name,
            version=version_range,
            license=UNKNOWN,
            category=Category.UNKNOWN,
        )

    return LicenseRecord(
        package=package_name,
        version=version_range,
        license=license_string,
        category=classify_license(license_string, policy_table),
        actual_version=actual_version,
    )


def classify_dependencies(manifest_location, policy_table, manifest_data=None):
    """
    Return a list of ``LicenseRecord``, one for each dependency declared in the
    ``manifest_location`` file, in declaration order.

    The license is read from the installed dependency manifest, under the
    ``node_modules`` directory next to the ``manifest_location``.
    Dependencies that are not installed are recorded with a "Not installed"
    license in the unknown category.
    """
    if manifest_data is None:
        manifest_data = load_manifest(manifest_location)

    node_modules = Path(manifest_location).parent / NODE_MODULES
    dependencies = get_all_dependencies(manifest_data)
    logger.info(f"Total dependencies to analyze: {len(dependencies)}")

    return [
        classify_dependency(node_modules, package_name, version_range, policy_table)
        for package_name, version_range in dependencies.items()
    ]
