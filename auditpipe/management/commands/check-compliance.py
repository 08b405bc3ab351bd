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

import sys

from django.core.management.base import CommandError

from auditpipe.management.commands import JobCommand


class Command(JobCommand):
    help = (
        "Check for license compliance issues in the analysis job results. "
        "Exit with a non-zero status if banned licenses are present or if the "
        "project license is not compliant."
    )

    def add_arguments(self, parser):
        super().add_arguments(parser)
        parser.add_argument(
            "--fail-on-review",
            action="store_true",
            help="Exit with a non-zero status if licenses need review.",
        )

    def handle(self, *args, **options):
        super().handle(*args, **options)

        if self.job.status != self.job.Status.COMPLETED:
            raise CommandError(
                f"Job {self.job.uuid} is not completed (status: {self.job.status})."
            )

        license_report = self.job.license_report or {}
        if error := license_report.get("error"):
            raise CommandError(f"No license report available: {error}")

        issues = self.get_compliance_issues(license_report, options["fail_on_review"])

        if issues and self.verbosity > 0:
            self.stderr.write(f"{len(issues)} compliance issues detected.")
            for issue in issues:
                self.stderr.write(f" > {issue}")
        elif self.verbosity > 0:
            self.stdout.write("No compliance issues detected.", self.style.SUCCESS)

        sys.exit(1 if issues else 0)

    @staticmethod
    def get_compliance_issues(license_report, fail_on_review=False):
        issues = [
            f"BANNED: {entry['package']}@{entry['version']} ({entry['license']})"
            for entry in license_report.get("banned", [])
        ]

        if not license_report.get("projectLicenseCompliant"):
            project_license = license_report.get("projectLicense")
            issues.append(f"PROJECT LICENSE NOT COMPLIANT: {project_license}")

        if fail_on_review:
            issues.extend(
                f"REVIEW: {entry['package']}@{entry['version']} ({entry['license']})"
                for entry in license_report.get("needsReview", [])
            )

        return issues
