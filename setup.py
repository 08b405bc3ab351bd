#!/usr/bin/env python
# -*- encoding: utf-8 -*-

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

from setuptools import find_packages
from setuptools import setup

__version__ = "1.0.0"


def get_requirements(req_file):
    return [
        r.strip()
        for r in open(req_file).readlines()
        if r.strip() and not r.strip().startswith("#")
    ]


setup(
    name="repoaudit",
    version=__version__,
    license="Apache-2.0",
    description="RepoAudit",
    long_description="RepoAudit: dependency license auditing for source repositories.",
    packages=find_packages(),
    include_package_data=True,
    package_data={"auditpipe": ["tests/data/*/*"]},
    zip_safe=False,
    python_requires=">= 3.10",
    install_requires=get_requirements("etc/requirements/base.txt"),
    extras_require={
        "dev": get_requirements("etc/requirements/dev.txt"),
    },
    entry_points={
        "console_scripts": [
            "repoaudit = repoaudit:command_line",
        ],
    },
    classifiers=[
        # complete classifiers list
        # http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Information Technology",
        "Intended Audience :: Legal Industry",
        "Framework :: Django",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Utilities",
    ],
    keywords=[
        "open source",
        "license",
        "compliance",
        "dependency",
        "sbom",
        "npm",
        "git",
        "pipeline",
        "policy",
    ],
)
