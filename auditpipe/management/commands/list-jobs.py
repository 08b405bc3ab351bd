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

from django.core.management.base import BaseCommand

from auditpipe.management.commands import JobStatusCommandMixin
from auditpipe.tasks import get_job_repository


class Command(JobStatusCommandMixin, BaseCommand):
    help = "List the analysis jobs requested by an owner, most recent first."
    separator = "-" * 50

    def add_arguments(self, parser):
        parser.add_argument("--owner", required=True, help="Owner reference.")

    def handle(self, *args, **options):
        verbosity = options["verbosity"]

        jobs = get_job_repository().list_jobs_by_owner(options["owner"])
        job_count = len(jobs)

        if not jobs and verbosity > 0:
            self.stdout.write(f"No jobs found for {options['owner']}")

        for index, job in enumerate(jobs, start=1):
            self.display_status(job, verbosity)

            if index != job_count and verbosity > 1:
                self.stdout.write(f"\n{self.separator}\n\n")
