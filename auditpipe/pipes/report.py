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
from collections.abc import Iterable
from pathlib import Path

from auditpipe.pipes.licenses import NODE_MODULES
from auditpipe.pipes.licenses import Category
from auditpipe.pipes.licenses import classify_dependencies
from auditpipe.pipes.licenses import classify_project_license
from auditpipe.pipes.manifest import get_declared_license
from auditpipe.pipes.manifest import load_manifest

logger = logging.getLogger(__name__)

# Report bucket names, in order, keyed by classification category.
BUCKETS = {
    Category.ALLOWED: "allowed",
    Category.BANNED: "banned",
    Category.NEEDS_REVIEW: "needsReview",
    Category.UNKNOWN: "unknown",
}

NO_MANIFEST_REPORT = {
    "error": "Package.json not found",
    "summary": {"error": "No package.json found"},
}

NOT_INSTALLED_WARNING = (
    "Dependencies were not installed, licenses are reported from declared "
    "metadata only"
)


def aggregate(records, project_license=None, project_compliant=False):
    """
    Return the license report mapping of the classified ``records``.

    The records are grouped in buckets by category, in their original order.
    The ``unknown`` records are not counted in the summary ``total``.
    """
    buckets = {bucket_name: [] for bucket_name in BUCKETS.values()}

    if not isinstance(records, Iterable) or isinstance(records, (str, dict)):
        logger.error(f"Cannot aggregate a non-iterable {type(records).__name__}")
        records = []

    for record in records:
        bucket_name = BUCKETS.get(record.category, BUCKETS[Category.UNKNOWN])
        buckets[bucket_name].append(record.as_dict())

    compliant = len(buckets["allowed"])
    non_compliant = len(buckets["banned"])
    needs_review = len(buckets["needsReview"])

    return {
        **buckets,
        "summary": {
            "total": compliant + non_compliant + needs_review,
            "compliant": compliant,
            "nonCompliant": non_compliant,
            "needsReview": needs_review,
        },
        "projectLicense": project_license,
        "projectLicenseCompliant": bool(project_compliant),
    }


def build_license_report(manifest_location, policy_table):
    """
    Classify the dependencies declared in the ``manifest_location`` file against
    the ``policy_table`` and return the aggregated license report.

    A degraded report, including an ``error`` entry, is returned when the manifest
    is missing or cannot be parsed.
    """
    if not manifest_location:
        logger.warning("No package.json available for the license analysis")
        return {
            "error": NO_MANIFEST_REPORT["error"],
            "summary": dict(NO_MANIFEST_REPORT["summary"]),
        }

    try:
        manifest_data = load_manifest(manifest_location)
    except (OSError, ValueError) as error:
        logger.warning(f"Cannot parse {manifest_location}: {error}")
        return {
            "error": "Package.json could not be parsed",
            "summary": {"error": str(error)},
        }

    project_license = get_declared_license(manifest_data)
    records = classify_dependencies(
        manifest_location, policy_table, manifest_data=manifest_data
    )

    report = aggregate(
        records,
        project_license=project_license,
        project_compliant=classify_project_license(project_license, policy_table),
    )

    node_modules = Path(manifest_location).parent / NODE_MODULES
    if not node_modules.is_dir():
        report["fallbackUsed"] = True
        report["warning"] = NOT_INSTALLED_WARNING

    return report
