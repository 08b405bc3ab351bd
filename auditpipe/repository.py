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

from django.core.exceptions import ValidationError

from auditpipe.models import AnalysisJob


class JobRepository:
    """
    Storage interface for the analysis job records.
    The pipeline only reads and writes jobs through this interface.
    """

    def create_job(self, owner, repo_url):
        """Create and return a new job in the ``pending`` state."""
        raise NotImplementedError

    def update_job(self, job_id, **fields):
        """Update the provided ``fields`` of the ``job_id`` job and return it."""
        raise NotImplementedError

    def get_job(self, job_id):
        """Return the ``job_id`` job or None if it does not exist."""
        raise NotImplementedError

    def list_jobs_by_owner(self, owner):
        """Return the list of jobs requested by ``owner``, most recent first."""
        raise NotImplementedError


class DjangoJobRepository(JobRepository):
    """Store the jobs as ``AnalysisJob`` database records."""

    model = AnalysisJob

    def create_job(self, owner, repo_url):
        return self.model.objects.create(owner=owner, repo_url=repo_url)

    def update_job(self, job_id, **fields):
        """
        Status changes are validated against the job lifecycle.
        Only the provided ``fields`` are written using ``update_fields`` to avoid
        overwriting values updated concurrently.
        """
        job = self.model.objects.get(pk=job_id)

        if (status := fields.get("status")) and status != job.status:
            job.check_transition(status)

        for field_name, value in fields.items():
            setattr(job, field_name, value)

        job.save(update_fields=[*fields.keys(), "updated_date"])
        return job

    def get_job(self, job_id):
        try:
            return self.model.objects.get(pk=job_id)
        except (self.model.DoesNotExist, ValidationError, ValueError):
            return

    def list_jobs_by_owner(self, owner):
        return list(self.model.objects.owned_by(owner))
