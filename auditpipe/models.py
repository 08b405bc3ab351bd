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
import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils.translation import gettext_lazy as _

from auditpipe.pipelines import humanize_time

logger = logging.getLogger(__name__)


class JobStateError(Exception):
    """The requested AnalysisJob status transition is not allowed."""


class UUIDPKModel(models.Model):
    uuid = models.UUIDField(
        verbose_name=_("UUID"),
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        db_index=True,
    )

    class Meta:
        abstract = True

    def __str__(self):
        return str(self.uuid)

    @property
    def short_uuid(self):
        return str(self.uuid)[0:8]


class AnalysisJobQuerySet(models.QuerySet):
    def owned_by(self, owner):
        return self.filter(owner=owner)

    def in_progress(self):
        return self.filter(status__in=AnalysisJob.IN_PROGRESS_STATUSES)

    def terminal(self):
        return self.filter(status__in=AnalysisJob.TERMINAL_STATUSES)


class AnalysisJob(UUIDPKModel):
    """
    A license analysis request on a public source repository.

    The ``status`` follows ``pending -> processing -> {completed | failed}``.
    Terminal states are final: a failed analysis is never retried, a new job is
    created instead.
    """

    class Status(models.TextChoices):
        """List of AnalysisJob status."""

        PENDING = "pending"
        PROCESSING = "processing"
        COMPLETED = "completed"
        FAILED = "failed"

    ALLOWED_TRANSITIONS = {
        Status.PENDING.value: (Status.PROCESSING, Status.FAILED),
        Status.PROCESSING.value: (Status.COMPLETED, Status.FAILED),
        Status.COMPLETED.value: (),
        Status.FAILED.value: (),
    }
    IN_PROGRESS_STATUSES = (Status.PENDING, Status.PROCESSING)
    TERMINAL_STATUSES = (Status.COMPLETED, Status.FAILED)

    owner = models.CharField(
        max_length=255,
        db_index=True,
        help_text=_("Opaque reference to the user that requested the analysis."),
    )
    repo_url = models.CharField(
        max_length=1024,
        help_text=_("URL of the public source repository to analyze."),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    sbom = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    license_report = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    error_message = models.TextField(blank=True)
    log = models.TextField(blank=True, editable=False)
    task_start_date = models.DateTimeField(blank=True, null=True, editable=False)
    task_end_date = models.DateTimeField(blank=True, null=True, editable=False)
    created_date = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_date = models.DateTimeField(auto_now=True)

    objects = AnalysisJobQuerySet.as_manager()

    class Meta:
        ordering = ["-created_date"]

    def __str__(self):
        return f"{self.repo_url} [{self.status}]"

    def can_transition_to(self, status):
        """Return True if this job is allowed to move to the provided ``status``."""
        return status in self.ALLOWED_TRANSITIONS.get(str(self.status), ())

    def check_transition(self, status):
        """Raise a ``JobStateError`` if moving to ``status`` is not allowed."""
        if not self.can_transition_to(status):
            raise JobStateError(
                f'AnalysisJob {self.uuid} cannot go from "{self.status}" to "{status}".'
            )

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def append_to_log(self, message, save=False):
        """Append the ``message`` string to the ``log`` field of this instance."""
        message = message.strip()
        if any(lf in message for lf in ("\n", "\r")):
            raise ValueError("message cannot contain line returns (either CR or LF).")

        self.log = self.log + message + "\n"
        if save:
            self.save(update_fields=["log"])

    @property
    def execution_time(self):
        if self.task_end_date and self.task_start_date:
            total_seconds = (self.task_end_date - self.task_start_date).total_seconds()
            return int(total_seconds)

    @property
    def execution_time_for_display(self):
        """Return the ``execution_time`` formatted for display."""
        execution_time = self.execution_time
        if execution_time is not None:
            return humanize_time(execution_time)

    @property
    def summary(self):
        """Return the license report summary, if available."""
        if self.license_report:
            return self.license_report.get("summary")
