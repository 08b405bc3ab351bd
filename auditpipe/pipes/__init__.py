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
import subprocess

from django.conf import settings

logger = logging.getLogger("auditpipe.pipes")


def truncate_output(output, max_size=None):
    """Return the ``output`` string truncated to ``max_size`` characters."""
    if max_size is None:
        max_size = settings.REPOAUDIT_COMMAND_OUTPUT_MAX_SIZE

    if not output or len(output) <= max_size:
        return output or ""

    return output[:max_size] + f"\n[output truncated to {max_size} characters]"


def run_command_safely(command_args, cwd=None, timeout=None, env=None):
    """
    Execute the external commands following security best practices.

    This function is using the subprocess.run function which simplifies running external
    commands. It provides a safer and more straightforward API compared to older methods
    like subprocess.Popen.

    - This does not use the Shell (shell=False) to prevent injection vulnerabilities.
    - The command should be provided as a list of ``command_args`` arguments.
    - Only full paths to executable commands should be provided to avoid any ambiguity.
    - The process is killed when it runs longer than ``timeout`` seconds.
    - The captured output is truncated to ``REPOAUDIT_COMMAND_OUTPUT_MAX_SIZE``.

    WARNING: If you're incorporating user input into the command, make
    sure to sanitize and validate the input to prevent any malicious commands from
    being executed.

    Raise a SubprocessError if the exit code was non-zero, and a TimeoutExpired
    (a SubprocessError subclass) when the ``timeout`` is reached.
    """
    completed_process = subprocess.run(  # noqa: S603
        command_args,
        cwd=cwd,
        env=env,
        timeout=timeout,
        capture_output=True,
        text=True,
    )

    stdout = truncate_output(completed_process.stdout)

    if completed_process.returncode:
        stderr = truncate_output(completed_process.stderr.strip())
        error_msg = f'Error while executing cmd="{completed_process.args}": "{stderr}"'
        raise subprocess.SubprocessError(error_msg)

    return stdout
