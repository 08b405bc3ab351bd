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
from pathlib import Path

from auditpipe.models import AnalysisJob
from auditpipe.pipes.install import InstallResult


def make_job(owner="user-1", repo_url="https://github.com/owner/repo", **data):
    """Create and return an AnalysisJob instance."""
    return AnalysisJob.objects.create(owner=owner, repo_url=repo_url, **data)


def make_package_json(directory, **data):
    """Write a ``package.json`` manifest with the ``data`` content in ``directory``."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    manifest_location = directory / "package.json"
    manifest_location.write_text(json.dumps(data))
    return manifest_location


def make_installed_package(project_directory, name, **data):
    """Install a fake ``name`` package in the ``project_directory`` node_modules."""
    package_directory = Path(project_directory, "node_modules", *name.split("/"))
    return make_package_json(package_directory, name=name, **data)


def make_clone(package_json=None, installed=None):
    """
    Return a side effect for the mocked ``clone_repository`` function.
    The clone creates the repository directory with an optional root ``package_json``
    manifest and the ``installed`` packages, a mapping of name -> package data.
    """

    def clone_repository(url, to_path, timeout=None):
        to_path.mkdir(parents=True)
        (to_path / "README.md").write_text("Readme")
        if package_json is not None:
            make_package_json(to_path, **package_json)
        for name, package_data in (installed or {}).items():
            make_installed_package(to_path, name, **package_data)

    return clone_repository


skipped_install = InstallResult(strategy="skip", installed=False, output="")
