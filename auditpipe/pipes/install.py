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

"""
Materialize the dependencies of a project on disk, in a ``node_modules``
directory next to its manifest.

The install strategies are tried in order until one succeeds. Each strategy is a
function taking an ``InstallContext`` and returning an ``InstallResult``, or raising
an ``InstallDegradation`` to hand over to the next strategy. The last strategy never
fails: it skips the install and the licenses are reported from the declared
metadata only.
"""

import logging
import os
import subprocess
from collections import namedtuple
from pathlib import Path

from django.conf import settings

from commoncode import command

from auditpipe.pipes import run_command_safely

logger = logging.getLogger(__name__)

LOCKFILE_NAMES = ("package-lock.json", "npm-shrinkwrap.json")

# Install lifecycle scripts of untrusted code are never executed.
NPM_COMMON_OPTIONS = ("--ignore-scripts", "--no-audit", "--no-fund")

InstallContext = namedtuple("InstallContext", "directory npm timeout")
InstallResult = namedtuple("InstallResult", "strategy installed output")


class InstallDegradation(Exception):
    """A dependency install strategy could not be completed."""


def get_npm_location():
    """Return the path to the npm executable or None if not installed."""
    if npm_location := command.find_in_path("npm"):
        return Path(npm_location)


def has_lockfile(directory):
    return any(Path(directory, name).is_file() for name in LOCKFILE_NAMES)


def run_npm(context, *npm_args):
    """Run npm with ``npm_args`` in the ``context`` directory and return its output."""
    if not context.npm:
        raise InstallDegradation("npm executable is not available.")

    cmd_args = (str(context.npm), *npm_args, *NPM_COMMON_OPTIONS)
    logger.info(f"Installing dependencies with: {cmd_args}")

    # Prevent any interactive prompt and keep the devDependencies when requested.
    npm_env = {**os.environ, "CI": "true", "NODE_ENV": "development"}

    try:
        return run_command_safely(
            cmd_args,
            cwd=context.directory,
            timeout=context.timeout,
            env=npm_env,
        )
    except subprocess.TimeoutExpired:
        raise InstallDegradation(
            f"{' '.join(npm_args)} did not complete in {context.timeout} seconds."
        )
    except (subprocess.SubprocessError, OSError) as error:
        raise InstallDegradation(str(error))


def install_from_lockfile(context):
    """Reproducible install of runtime and development dependencies from lockfile."""
    if not has_lockfile(context.directory):
        raise InstallDegradation("No lockfile available.")

    output = run_npm(context, "ci", "--include=dev")
    return InstallResult(strategy="npm_ci", installed=True, output=output)


def install_all_dependencies(context):
    """Install all the dependency classes without a lockfile."""
    output = run_npm(context, "install", "--include=dev")
    return InstallResult(strategy="npm_install", installed=True, output=output)


def install_production_dependencies(context):
    """Install the runtime dependencies only."""
    output = run_npm(context, "install", "--omit=dev")
    return InstallResult(
        strategy="npm_install_production", installed=True, output=output
    )


def skip_install(context):
    """Do not install, the analysis proceeds with the manifest data only."""
    return InstallResult(strategy="skip", installed=False, output="")


INSTALL_STRATEGIES = (
    install_from_lockfile,
    install_all_dependencies,
    install_production_dependencies,
    skip_install,
)


def install_dependencies(directory, strategies=INSTALL_STRATEGIES, timeout=None):
    """
    Install the dependencies of the project located in ``directory`` using the
    first successful ``strategies`` entry and return its ``InstallResult``.

    Raise an ``InstallDegradation`` only if all the strategies failed.
    """
    if timeout is None:
        timeout = settings.REPOAUDIT_INSTALL_TIMEOUT

    context = InstallContext(
        directory=Path(directory),
        npm=get_npm_location(),
        timeout=timeout,
    )

    errors = []
    for strategy in strategies:
        try:
            result = strategy(context)
        except InstallDegradation as error:
            logger.warning(f"Install strategy {strategy.__name__} failed: {error}")
            errors.append(f"{strategy.__name__}: {error}")
            continue

        logger.info(f"Dependencies install completed with {result.strategy}")
        return result

    raise InstallDegradation(
        "All dependency install strategies failed:\n" + "\n".join(errors)
    )
