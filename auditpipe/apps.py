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
from pathlib import Path

from django.apps import AppConfig
from django.conf import settings
from django.core.management.color import color_style
from django.utils.translation import gettext_lazy as _

from auditpipe.policies import DEFAULT_POLICY_TABLE
from auditpipe.policies import load_policies_file
from auditpipe.policies import make_policy_table

logger = logging.getLogger(__name__)
style = color_style()


class AuditPipeConfig(AppConfig):
    name = "auditpipe"
    verbose_name = _("AuditPipe")

    def __init__(self, app_name, app_module):
        super().__init__(app_name, app_module)

        self.policy_table = DEFAULT_POLICY_TABLE

        workspace_location = settings.REPOAUDIT_WORKSPACE_LOCATION
        self.workspace_path = Path(workspace_location).expanduser().resolve()

    def ready(self):
        self.set_policy_table()

    @property
    def tmp_path(self):
        """Return the directory where the job workspaces are created."""
        return self.workspace_path / "tmp"

    def set_policy_table(self):
        """
        Set the global app policy table on the app instance.

        If the policies file is available but not formatted properly or doesn't
        include the proper content, we want to raise an exception while the app
        is loading to warn system admins about the issue.
        """
        policies_file_setting = getattr(settings, "REPOAUDIT_POLICIES_FILE", None)
        if not policies_file_setting:
            return

        policies_file = Path(policies_file_setting).expanduser()
        if policies_file.exists():
            policies = load_policies_file(policies_file)
            self.policy_table = make_policy_table(policies)
            logger.debug(style.SUCCESS(f"Loaded policies from {policies_file}"))
        else:
            logger.debug(style.WARNING("Policies file not found, using defaults."))
