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

from django.core.management.base import CommandError

from auditpipe.management.commands import JobCommand


class Command(JobCommand):
    help = "Output the analysis job SBOM and license report as JSON."

    def add_arguments(self, parser):
        super().add_arguments(parser)
        parser.add_argument(
            "--indent",
            type=int,
            default=2,
            help="Number of spaces of the JSON indentation. Default is 2.",
        )

    def handle(self, *args, **options):
        super().handle(*args, **options)

        if not self.job.is_terminal:
            raise CommandError(
                f"Job {self.job.uuid} is not over (status: {self.job.status})."
            )

        results = {
            "job": str(self.job.uuid),
            "repoUrl": self.job.repo_url,
            "status": self.job.status,
            "error": self.job.error_message or None,
            "sbom": self.job.sbom,
            "licenseReport": self.job.license_report,
        }
        self.stdout.write(json.dumps(results, indent=options["indent"]))
