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
from django.core.management.base import CommandError

from auditpipe.tasks import get_job_repository


class JobCommand(BaseCommand):
    """
    Base class for management commands that take a mandatory --job argument.
    The job is retrieved from the job repository and stored on the instance as
    `self.job`.
    """

    job = None
    verbosity = 1

    def add_arguments(self, parser):
        parser.add_argument("--job", required=True, help="Analysis job UUID.")

    def handle(self, *args, **options):
        self.verbosity = options["verbosity"]
        job_uuid = options["job"]

        self.job = get_job_repository().get_job(job_uuid)
        if not self.job:
            raise CommandError(f"Job {job_uuid} does not exist")


class JobStatusCommandMixin:
    def get_status_code(self, job):
        status = job.status
        Status = job.Status

        if status == Status.COMPLETED:
            return self.style.SUCCESS(status.upper())
        elif status == Status.FAILED:
            return self.style.ERROR(status.upper())

        return status.upper()

    def get_summary_messages(self, job):
        summary = job.summary
        if not summary:
            return []

        if error := summary.get("error"):
            return [f"License report: {error}"]

        return [
            "\nLicenses:",
            f" - Total: {summary['total']}",
            f" - Compliant: {summary['compliant']}",
            f" - Non-compliant: {summary['nonCompliant']}",
            f" - Needs review: {summary['needsReview']}",
        ]

    def display_status(self, job, verbosity):
        message = [
            self.style.HTTP_INFO(f"{job.uuid} {job.repo_url}"),
            f"Status: {self.get_status_code(job)}",
        ]

        if verbosity >= 2:
            message.append(f"Owner: {job.owner}")
            create_date = job.created_date.strftime("%b %d %Y %H:%M")
            message.append(f"Create date: {create_date}")
            if execution_time := job.execution_time_for_display:
                message.append(f"Executed in {execution_time}")
            if job.error_message:
                message.append(self.style.ERROR(f"Error: {job.error_message}"))
            message.extend(self.get_summary_messages(job))

        if verbosity >= 3 and job.log:
            message.append("\nLog:")
            for line in job.log.rstrip("\n").splitlines():
                message.append(3 * " " + line)

        for line in message:
            self.stdout.write(line)
