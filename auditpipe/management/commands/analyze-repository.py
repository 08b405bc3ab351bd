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

from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.management.base import CommandError

from auditpipe import tasks
from auditpipe.management.commands import JobStatusCommandMixin
from auditpipe.pipes.fetch import AcquisitionError
from auditpipe.pipes.fetch import validate_repo_url


class Command(JobStatusCommandMixin, BaseCommand):
    help = "Analyze the dependency licenses of a public source repository."

    def add_arguments(self, parser):
        parser.add_argument("repo_url", help="URL of the repository to analyze.")
        parser.add_argument(
            "--owner",
            default="cli",
            help="Reference of the user requesting the analysis. Default is 'cli'.",
        )
        parser.add_argument(
            "--async",
            action="store_true",
            dest="async",
            help=(
                "Add the analysis to the tasks queue for execution by a worker "
                "instead of running in the current thread."
            ),
        )

    def handle(self, *args, **options):
        verbosity = options["verbosity"]
        repo_url = options["repo_url"]

        try:
            validate_repo_url(repo_url)
        except AcquisitionError as error:
            raise CommandError(error)

        if options["async"]:
            if not settings.REPOAUDIT_ASYNC:
                msg = "REPOAUDIT_ASYNC=False is not compatible with --async option."
                raise CommandError(msg)

            job = tasks.submit_analysis(owner=options["owner"], repo_url=repo_url)
            msg = f"Job {job.uuid} added to the tasks queue for execution."
            self.stdout.write(msg, self.style.SUCCESS)
            sys.exit(0)

        repository = tasks.get_job_repository()
        job = repository.create_job(owner=options["owner"], repo_url=repo_url)
        self.stdout.write(f"Start the analysis of {repo_url} in job {job.uuid}...")

        try:
            job = tasks.execute_analysis_task(job.pk, repository=repository)
        except KeyboardInterrupt:
            tasks.mark_job_failed(job.pk, "Analysis stopped.", repository)
            raise CommandError("Analysis stopped.")

        self.display_status(job, verbosity + 1)

        if job.status == job.Status.FAILED:
            raise CommandError(f"Analysis failed: {job.error_message}")
