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

from auditpipe.management.commands import JobCommand
from auditpipe.management.commands import JobStatusCommandMixin


class Command(JobStatusCommandMixin, JobCommand):
    help = "Display status information about the provided analysis job."

    def handle(self, *args, **options):
        super().handle(*args, **options)
        # Make the default verbosity of this command the same as the verbose
        # `list-jobs` command.
        verbosity = options["verbosity"] + 2
        self.display_status(self.job, verbosity)
