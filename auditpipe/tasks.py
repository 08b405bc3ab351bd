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
import threading

from django.conf import settings
from django.db import connection
from django.db import transaction
from django.utils import timezone

import django_rq

from auditpipe.models import AnalysisJob
from auditpipe.models import JobStateError
from auditpipe.pipelines.analyze_repository import AnalyzeRepository
from auditpipe.repository import DjangoJobRepository

logger = logging.getLogger(__name__)


def info(message, pk):
    logger.info(f"Job[{pk}] {message}")


def get_job_repository():
    """Return the default job repository."""
    return DjangoJobRepository()


def mark_job_failed(job_pk, error_message, repository=None):
    """
    Set the ``job_pk`` job as failed with the provided ``error_message``.
    A job already in a terminal state is left unchanged.
    """
    repository = repository or get_job_repository()

    job = repository.get_job(job_pk)
    if not job or job.is_terminal:
        return

    repository.update_job(
        job.pk,
        status=AnalysisJob.Status.FAILED,
        error_message=error_message,
        task_end_date=timezone.now(),
    )


def report_failure(job, connection, type, value, traceback):
    """
    Report a job failure as a call back when an exception is raised during the Job
    execution but was not caught by the task itself.
    """
    info(f"Worker failure: {value}", job.id)
    mark_job_failed(job_pk=job.id, error_message=f"value={value} trace={traceback}")


def execute_analysis_task(job_pk, repository=None, policy_table=None):
    """
    Run the ``AnalyzeRepository`` pipeline on the ``job_pk`` job and store its
    results.
    The job ends ``completed`` or, if the pipeline failed, ``failed`` with the
    failure message.
    """
    info(f"Enter `execute_analysis_task` AnalysisJob.pk={job_pk}", job_pk)
    repository = repository or get_job_repository()

    job = repository.get_job(job_pk)
    if not job:
        logger.error(f"Job[{job_pk}] AnalysisJob not found, the task is aborted.")
        return

    try:
        job = repository.update_job(
            job.pk,
            status=AnalysisJob.Status.PROCESSING,
            task_start_date=timezone.now(),
        )
    except JobStateError as error:
        logger.error(f"Job[{job_pk}] {error}")
        return

    info(f'Run pipeline on repository: "{job.repo_url}"', job_pk)
    pipeline = AnalyzeRepository(job, repository, policy_table=policy_table)
    exitcode, output = pipeline.execute()

    if exitcode:
        error_message = str(pipeline.failure) or pipeline.failure.__class__.__name__
        fields = {
            "status": AnalysisJob.Status.FAILED,
            "error_message": error_message,
        }
        info(f"Analysis failed: {error_message}", job_pk)
    else:
        fields = {
            "status": AnalysisJob.Status.COMPLETED,
            "sbom": pipeline.sbom,
            "license_report": pipeline.license_report,
        }
        info("Analysis completed", job_pk)

    return repository.update_job(job.pk, task_end_date=timezone.now(), **fields)


class TaskHandle(threading.Thread):
    """
    Run the analysis of a job in a background thread.

    Any exception escaping the analysis task is logged, kept on the ``exception``
    attribute, and the job is set as failed.
    """

    def __init__(self, job_pk, repository=None, policy_table=None):
        super().__init__(name=f"analysis-{job_pk}", daemon=True)
        self.job_pk = job_pk
        self.repository = repository
        self.policy_table = policy_table
        self.exception = None

    def run(self):
        try:
            execute_analysis_task(
                self.job_pk,
                repository=self.repository,
                policy_table=self.policy_table,
            )
        except Exception as exception:
            self.exception = exception
            logger.exception(f"Job[{self.job_pk}] Analysis task crashed")
            try:
                mark_job_failed(self.job_pk, str(exception), self.repository)
            except Exception:
                logger.exception(f"Job[{self.job_pk}] Cannot set the job as failed")
        finally:
            # The thread database connection is not managed by Django.
            connection.close()


def start_analysis(job, repository=None, policy_table=None):
    """
    Start the analysis of the ``job`` without waiting for its completion.

    The analysis task is enqueued for execution by a worker when
    ``REPOAUDIT_ASYNC`` is enabled, or runs in a background thread otherwise.
    Return the enqueued rq job or the started ``TaskHandle``.
    """
    job_pk = str(job.pk)

    if not settings.REPOAUDIT_ASYNC:
        task_handle = TaskHandle(job_pk, repository, policy_table)
        task_handle.start()
        return task_handle

    return django_rq.enqueue(
        execute_analysis_task,
        job_id=job_pk,
        job_pk=job_pk,
        on_failure=report_failure,
        job_timeout=settings.REPOAUDIT_TASK_TIMEOUT,
    )


def submit_analysis(owner, repo_url, repository=None):
    """
    Create a pending analysis job for ``owner`` on the ``repo_url`` repository,
    start its analysis, and return the job.

    on_commit() is used to postpone the analysis start after the transaction is
    successfully committed.
    If there is no active transaction, the analysis starts immediately.
    """
    repository = repository or get_job_repository()
    job = repository.create_job(owner=owner, repo_url=repo_url)
    info(f"Analysis submitted for {repo_url}", job.pk)

    transaction.on_commit(lambda: start_analysis(job, repository=repository))
    return job
