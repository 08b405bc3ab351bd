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
import shutil
import tempfile
from pathlib import Path

from django.apps import apps

from auditpipe.pipelines import BasePipeline
from auditpipe.pipes import fetch
from auditpipe.pipes import manifest
from auditpipe.pipes import report

logger = logging.getLogger(__name__)


class AnalyzeRepository(BasePipeline):
    """
    Analyze the declared licenses of the dependencies of a public source repository.

    The repository is cloned in a temporary workspace where its dependencies are
    installed when possible. The software bill of materials is extracted from the
    ``package.json`` manifest and each dependency license is classified against
    the license policy table.

    The workspace is always removed once the analysis is over.
    """

    def __init__(self, job, repository, policy_table=None):
        """Load the Pipeline execution context from an analysis job."""
        super().__init__()
        self.job = job
        self.repository = repository

        app_config = apps.get_app_config("auditpipe")
        self.policy_table = policy_table or app_config.policy_table
        self.tmp_path = app_config.tmp_path

        self.workspace_directory = None
        self.workspace = None
        self.sbom = None
        self.license_report = None

    @classmethod
    def steps(cls):
        return (
            cls.create_workspace,
            cls.acquire_repository,
            cls.extract_sbom,
            cls.classify_licenses,
        )

    @classmethod
    def get_final_steps(cls):
        return (cls.remove_workspace,)

    def append_to_log(self, message):
        """Persist each line of the ``message`` in the job execution log."""
        super().append_to_log(message)

        lines = [line for line in message.splitlines() if line.strip()]
        if not lines:
            return

        for line in lines:
            self.job.append_to_log(line)
        self.repository.update_job(self.job.pk, log=self.job.log)

    def create_workspace(self):
        """Create a unique temporary directory for this analysis."""
        self.tmp_path.mkdir(parents=True, exist_ok=True)
        prefix = f"job-{self.job.short_uuid}-"
        workspace_directory = tempfile.mkdtemp(prefix=prefix, dir=self.tmp_path)
        self.workspace_directory = Path(workspace_directory)
        self.log(f"Workspace created: {self.workspace_directory}")

    def acquire_repository(self):
        """Clone the repository and install its dependencies when possible."""
        self.workspace = fetch.acquire_repository(
            url=self.job.repo_url,
            to=self.workspace_directory,
        )

        if install := self.workspace.install:
            self.log(f"Dependencies install strategy: {install.strategy}")
        else:
            self.log("Dependencies not installed")

    def extract_sbom(self):
        """Extract the software bill of materials from the project manifest."""
        self.sbom = manifest.extract_sbom(
            manifest_location=self.workspace.manifest_location,
            root_dir=self.workspace.path,
        )

        if error := self.sbom.get("error"):
            self.log(f"SBOM not available: {error}")
        else:
            self.log(f"SBOM extracted from {self.sbom['foundAt']}")

    def classify_licenses(self):
        """Classify the dependency licenses and aggregate the license report."""
        self.license_report = report.build_license_report(
            manifest_location=self.workspace.manifest_location,
            policy_table=self.policy_table,
        )

        summary = self.license_report.get("summary", {})
        if error := summary.get("error"):
            self.log(f"License report not available: {error}")
        else:
            self.log(
                f"{summary['total']} licenses classified: "
                f"{summary['compliant']} compliant, "
                f"{summary['nonCompliant']} non-compliant, "
                f"{summary['needsReview']} need review"
            )

    def remove_workspace(self):
        """Remove the temporary workspace directory and all of its content."""
        if not self.workspace_directory:
            return

        shutil.rmtree(self.workspace_directory, ignore_errors=True)
        if self.workspace_directory.exists():
            message = f"Workspace could not be removed: {self.workspace_directory}"
            logger.warning(message)
            self.log(message)
            return

        self.log(f"Workspace removed: {self.workspace_directory}")
