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
import uuid
from io import StringIO
from unittest import mock

from django.core.management import CommandError
from django.core.management import call_command
from django.test import TestCase
from django.test import override_settings

from auditpipe.models import AnalysisJob
from auditpipe.tests import make_job

license_report = {
    "allowed": [{"package": "left-pad", "version": "^1.0.0", "license": "MIT"}],
    "banned": [],
    "needsReview": [],
    "unknown": [],
    "summary": {"total": 1, "compliant": 1, "nonCompliant": 0, "needsReview": 0},
    "projectLicense": "MIT",
    "projectLicenseCompliant": True,
}


def make_completed_job(**report_data):
    return make_job(
        status=AnalysisJob.Status.COMPLETED,
        sbom={"projectName": "repo", "version": "1.0.0"},
        license_report={**license_report, **report_data},
    )


class AuditPipeManagementCommandTest(TestCase):
    def test_auditpipe_management_command_job_argument(self):
        options = ["--job", str(uuid.uuid4())]
        with self.assertRaisesMessage(CommandError, "does not exist"):
            call_command("status", *options)

        options = ["--job", "not-a-uuid"]
        with self.assertRaisesMessage(CommandError, "Job not-a-uuid does not exist"):
            call_command("status", *options)

    @mock.patch("auditpipe.tasks.execute_analysis_task")
    def test_auditpipe_management_command_analyze_repository(self, mock_execute_task):
        def execute_analysis_task(job_pk, repository):
            return repository.update_job(
                job_pk,
                status=AnalysisJob.Status.FAILED,
                error_message="Failed to clone",
            )

        mock_execute_task.side_effect = execute_analysis_task

        expected = "URL scheme 'ftp' is not supported"
        with self.assertRaisesMessage(CommandError, expected):
            call_command("analyze-repository", "ftp://a.b/owner/repo")
        self.assertEqual(0, AnalysisJob.objects.count())

        out = StringIO()
        options = ["https://github.com/owner/repo", "--owner", "alice"]
        with self.assertRaisesMessage(CommandError, "Analysis failed: Failed to clone"):
            call_command("analyze-repository", *options, stdout=out, no_color=True)

        job = AnalysisJob.objects.get()
        self.assertEqual("alice", job.owner)
        self.assertEqual(AnalysisJob.Status.FAILED, job.status)
        expected = "Start the analysis of https://github.com/owner/repo"
        self.assertIn(expected, out.getvalue())
        self.assertIn("Status: FAILED", out.getvalue())

    @mock.patch("auditpipe.tasks.execute_analysis_task")
    def test_auditpipe_management_command_analyze_repository_completed(
        self, mock_execute_task
    ):
        def execute_analysis_task(job_pk, repository):
            repository.update_job(job_pk, status=AnalysisJob.Status.PROCESSING)
            return repository.update_job(
                job_pk,
                status=AnalysisJob.Status.COMPLETED,
                license_report=license_report,
            )

        mock_execute_task.side_effect = execute_analysis_task

        out = StringIO()
        call_command(
            "analyze-repository",
            "https://github.com/owner/repo",
            stdout=out,
            no_color=True,
        )
        out_value = out.getvalue()
        self.assertIn("Status: COMPLETED", out_value)
        self.assertIn(" - Compliant: 1", out_value)
        self.assertEqual("cli", AnalysisJob.objects.get().owner)

    @override_settings(REPOAUDIT_ASYNC=False)
    def test_auditpipe_management_command_analyze_repository_async_not_enabled(self):
        options = ["https://github.com/owner/repo", "--async"]
        expected = "REPOAUDIT_ASYNC=False is not compatible with --async option."
        with self.assertRaisesMessage(CommandError, expected):
            call_command("analyze-repository", *options)

    @override_settings(REPOAUDIT_ASYNC=True)
    @mock.patch("auditpipe.tasks.start_analysis")
    def test_auditpipe_management_command_analyze_repository_async(
        self, mock_start_analysis
    ):
        out = StringIO()
        options = ["https://github.com/owner/repo", "--async"]
        with self.captureOnCommitCallbacks(execute=True):
            with self.assertRaises(SystemExit) as cm:
                call_command(
                    "analyze-repository", *options, stdout=out, no_color=True
                )
        self.assertEqual(0, cm.exception.code)

        job = AnalysisJob.objects.get()
        self.assertIn(f"Job {job.uuid} added to the tasks queue", out.getvalue())
        mock_start_analysis.assert_called_once()

    def test_auditpipe_management_command_status(self):
        job = make_completed_job()
        job.append_to_log("Step [acquire_repository] completed", save=True)

        out = StringIO()
        call_command("status", "--job", str(job.uuid), stdout=out, no_color=True)
        out_value = out.getvalue()
        self.assertIn(f"{job.uuid} https://github.com/owner/repo", out_value)
        self.assertIn("Status: COMPLETED", out_value)
        self.assertIn("Owner: user-1", out_value)
        self.assertIn(" - Total: 1", out_value)
        self.assertIn("   Step [acquire_repository] completed", out_value)

        job = make_job(
            status=AnalysisJob.Status.FAILED, error_message="Failed to clone"
        )
        out = StringIO()
        call_command("status", "--job", str(job.uuid), stdout=out, no_color=True)
        self.assertIn("Error: Failed to clone", out.getvalue())

    def test_auditpipe_management_command_list_jobs(self):
        job1 = make_job(owner="alice")
        job2 = make_job(owner="alice", repo_url="https://github.com/owner/other")
        make_job(owner="bob")

        out = StringIO()
        call_command("list-jobs", "--owner", "alice", stdout=out, no_color=True)
        out_value = out.getvalue()
        self.assertIn(str(job1.uuid), out_value)
        self.assertIn(str(job2.uuid), out_value)
        self.assertEqual(2, out_value.count("Status: PENDING"))

        out = StringIO()
        call_command("list-jobs", "--owner", "nobody", stdout=out)
        self.assertEqual("No jobs found for nobody", out.getvalue().strip())

    def test_auditpipe_management_command_check_compliance(self):
        job = make_completed_job()

        out = StringIO()
        with self.assertRaises(SystemExit) as cm:
            call_command("check-compliance", "--job", str(job.uuid), stdout=out)
        self.assertEqual(0, cm.exception.code)
        self.assertEqual("No compliance issues detected.", out.getvalue().strip())

        job = make_completed_job(
            banned=[{"package": "gpl-lib", "version": "^1.0.0", "license": "GPL-3.0"}],
            needsReview=[{"package": "mpl-lib", "version": "2", "license": "MPL-2.0"}],
            projectLicense="Unknown",
            projectLicenseCompliant=False,
        )

        err = StringIO()
        with self.assertRaises(SystemExit) as cm:
            call_command("check-compliance", "--job", str(job.uuid), stderr=err)
        self.assertEqual(1, cm.exception.code)
        expected = (
            "2 compliance issues detected.\n"
            " > BANNED: gpl-lib@^1.0.0 (GPL-3.0)\n"
            " > PROJECT LICENSE NOT COMPLIANT: Unknown"
        )
        self.assertEqual(expected, err.getvalue().strip())

        err = StringIO()
        options = ["--job", str(job.uuid), "--fail-on-review"]
        with self.assertRaises(SystemExit) as cm:
            call_command("check-compliance", *options, stderr=err)
        self.assertEqual(1, cm.exception.code)
        self.assertIn(" > REVIEW: mpl-lib@2 (MPL-2.0)", err.getvalue())

    def test_auditpipe_management_command_check_compliance_review_only(self):
        job = make_completed_job(
            needsReview=[{"package": "mpl-lib", "version": "2", "license": "MPL-2.0"}],
        )

        with self.assertRaises(SystemExit) as cm:
            call_command("check-compliance", "--job", str(job.uuid), stdout=StringIO())
        self.assertEqual(0, cm.exception.code)

        options = ["--job", str(job.uuid), "--fail-on-review"]
        with self.assertRaises(SystemExit) as cm:
            call_command("check-compliance", *options, stderr=StringIO())
        self.assertEqual(1, cm.exception.code)

    def test_auditpipe_management_command_check_compliance_unavailable(self):
        job = make_job()
        with self.assertRaisesMessage(CommandError, "is not completed"):
            call_command("check-compliance", "--job", str(job.uuid))

        job = make_job(
            status=AnalysisJob.Status.COMPLETED,
            license_report={"error": "Package.json not found"},
        )
        expected = "No license report available: Package.json not found"
        with self.assertRaisesMessage(CommandError, expected):
            call_command("check-compliance", "--job", str(job.uuid))

    def test_auditpipe_management_command_output(self):
        job = make_job()
        with self.assertRaisesMessage(CommandError, "is not over"):
            call_command("output", "--job", str(job.uuid))

        job = make_completed_job()
        out = StringIO()
        call_command("output", "--job", str(job.uuid), stdout=out)

        results = json.loads(out.getvalue())
        self.assertEqual(str(job.uuid), results["job"])
        self.assertEqual("completed", results["status"])
        self.assertIsNone(results["error"])
        self.assertEqual("repo", results["sbom"]["projectName"])
        self.assertEqual(license_report, results["licenseReport"])
