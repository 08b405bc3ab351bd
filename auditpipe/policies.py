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

from dataclasses import dataclass

from django.core.exceptions import ValidationError

import saneyaml

POLICY_LISTS = ("allowed", "banned", "review")


@dataclass(frozen=True)
class PolicyTable:
    """
    The license compliance rules: three lists of license patterns matched
    case-insensitively as substrings of a declared license string.

    Instances are immutable and shared by every classification without locking.
    """

    allowed: tuple = ()
    banned: tuple = ()
    review: tuple = ()

    @classmethod
    def from_dict(cls, license_policies):
        return cls(
            **{
                name: tuple(license_policies.get(name) or [])
                for name in POLICY_LISTS
            }
        )

    def as_dict(self):
        """Return the data as a serializable dict."""
        return {name: list(getattr(self, name)) for name in POLICY_LISTS}


DEFAULT_POLICY_TABLE = PolicyTable(
    allowed=(
        "MIT",
        "Apache-2.0",
        "Apache 2.0",
        "BSD-2-Clause",
        "BSD-3-Clause",
        "ISC",
        "BSD",
        "Unlicense",
    ),
    banned=("GPL-1.0", "GPL-2.0", "GPL-3.0", "AGPL-1.0", "AGPL-3.0"),
    review=("LGPL", "MPL"),
)


def load_policies_yaml(policies_yaml):
    """Load provided ``policies_yaml``."""
    try:
        return saneyaml.load(policies_yaml)
    except saneyaml.YAMLError as e:
        raise ValidationError(f"Policies file format error: {e}")


def load_policies_file(policies_file, validate=True):
    """
    Load provided ``policies_file`` into a Python dictionary. The policies format
    is validated by default to ensure the license policy lists are well formed.
    """
    policies_dict = load_policies_yaml(policies_yaml=policies_file.read_text())
    if validate:
        validate_policies(policies_dict)
    return policies_dict


def validate_policies(policies_dict):
    """
    Return True if the provided ``policies_dict`` contains a ``license_policies``
    mapping of license pattern lists.
    """
    if not isinstance(policies_dict, dict):
        raise ValidationError("The `policies_dict` argument must be a dictionary.")

    license_policies = policies_dict.get("license_policies")
    if not isinstance(license_policies, dict):
        raise ValidationError(
            "The `license_policies` mapping with at least one of the following "
            f"lists must be present: {', '.join(POLICY_LISTS)}"
        )

    if not any(name in license_policies for name in POLICY_LISTS):
        raise ValidationError(
            "At least one of the following license policy lists must be present: "
            f"{', '.join(POLICY_LISTS)}"
        )

    for name in POLICY_LISTS:
        patterns = license_policies.get(name) or []
        if not isinstance(patterns, list):
            raise ValidationError(f"The `{name}` license policies must be a list.")
        if not all(isinstance(pattern, str) and pattern for pattern in patterns):
            raise ValidationError(
                f"The `{name}` license policies must only contain non-empty strings."
            )

    return True


def make_policy_table(policies_dict):
    """Return a ``PolicyTable`` built from the provided ``policies_dict``."""
    validate_policies(policies_dict)
    return PolicyTable.from_dict(policies_dict["license_policies"])
