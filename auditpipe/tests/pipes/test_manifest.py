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

import tempfile
from pathlib import Path

from django.test import TestCase

from auditpipe.pipes import manifest
from auditpipe.tests import make_package_json


class AuditPipeManifestPipesTest(TestCase):
    def setUp(self):
        self.root_dir = Path(tempfile.mkdtemp())

    def test_auditpipe_pipes_manifest_locate_manifest_root(self):
        self.assertIsNone(manifest.locate_manifest(self.root_dir))

        make_package_json(self.root_dir / "a_package", name="nested")
        expected = make_package_json(self.root_dir, name="root")
        self.assertEqual(expected, manifest.locate_manifest(self.root_dir))

    def test_auditpipe_pipes_manifest_locate_manifest_nested(self):
        make_package_json(self.root_dir / "b" / "c" / "d", name="too-deep")
        self.assertIsNone(manifest.locate_manifest(self.root_dir))

        second_level = make_package_json(self.root_dir / "a" / "web", name="web")
        self.assertEqual(second_level, manifest.locate_manifest(self.root_dir))

        first_level = make_package_json(self.root_dir / "z", name="z")
        self.assertEqual(first_level, manifest.locate_manifest(self.root_dir))

        sorted_first = make_package_json(self.root_dir / "m", name="m")
        self.assertEqual(sorted_first, manifest.locate_manifest(self.root_dir))

    def test_auditpipe_pipes_manifest_locate_manifest_ignored_directories(self):
        make_package_json(self.root_dir / "node_modules", name="dependency")
        make_package_json(self.root_dir / ".git" / "hooks", name="hooks")
        self.assertIsNone(manifest.locate_manifest(self.root_dir))

        # A directory named package.json is not a manifest
        (self.root_dir / "package.json").mkdir()
        self.assertIsNone(manifest.locate_manifest(self.root_dir))

    def test_auditpipe_pipes_manifest_normalize_license(self):
        normalize = manifest.normalize_license
        self.assertEqual("MIT", normalize("MIT"))
        self.assertEqual("MIT", normalize({"type": "MIT", "url": "https://a.b"}))
        self.assertEqual("MIT, Apache-2.0", normalize(["MIT", {"type": "Apache-2.0"}]))
        self.assertEqual("Unknown", normalize(None))
        self.assertEqual("Unknown", normalize(""))
        self.assertEqual("Unknown", normalize([]))
        self.assertEqual("Unknown", normalize({"url": "https://a.b"}))
        self.assertEqual("Unknown", normalize(42))

    def test_auditpipe_pipes_manifest_get_declared_license(self):
        get_license = manifest.get_declared_license
        self.assertEqual("ISC", get_license({"license": "ISC"}))
        self.assertEqual("BSD", get_license({"licenses": [{"type": "BSD"}]}))
        self.assertEqual("MIT", get_license({"license": "MIT", "licenses": ["BSD"]}))
        self.assertEqual("Unknown", get_license({}))

    def test_auditpipe_pipes_manifest_load_manifest(self):
        manifest_location = make_package_json(self.root_dir, name="repo")
        self.assertEqual({"name": "repo"}, manifest.load_manifest(manifest_location))

        manifest_location.write_text("[1, 2]")
        with self.assertRaises(ValueError):
            manifest.load_manifest(manifest_location)

        manifest_location.write_text("{not json")
        with self.assertRaises(ValueError):
            manifest.load_manifest(manifest_location)

    def test_auditpipe_pipes_manifest_get_dependencies(self):
        manifest_data = {
            "dependencies": {"left-pad": "^1.0.0", "lodash": 4},
            "devDependencies": ["jest"],
        }
        expected = {"left-pad": "^1.0.0", "lodash": "4"}
        dependencies = manifest.get_dependencies(manifest_data, "dependencies")
        self.assertEqual(expected, dependencies)
        dependencies = manifest.get_dependencies(manifest_data, "devDependencies")
        self.assertEqual({}, dependencies)
        self.assertEqual({}, manifest.get_dependencies({}, "dependencies"))

    def test_auditpipe_pipes_manifest_extract_sbom(self):
        project_dir = self.root_dir / "packages" / "app"
        manifest_location = make_package_json(
            project_dir,
            name="app",
            version="1.2.3",
            license={"type": "MIT"},
            dependencies={"left-pad": "^1.0.0"},
            devDependencies={"jest": "^29.0.0"},
        )

        expected = {
            "projectName": "app",
            "version": "1.2.3",
            "dependencies": {"left-pad": "^1.0.0"},
            "devDependencies": {"jest": "^29.0.0"},
            "license": "MIT",
            "foundAt": "packages/app/package.json",
        }
        sbom = manifest.extract_sbom(manifest_location, self.root_dir)
        self.assertEqual(expected, sbom)

    def test_auditpipe_pipes_manifest_extract_sbom_defaults(self):
        manifest_location = make_package_json(self.root_dir)
        sbom = manifest.extract_sbom(manifest_location, self.root_dir)
        self.assertEqual("Unknown", sbom["projectName"])
        self.assertEqual("Unknown", sbom["version"])
        self.assertEqual("Unknown", sbom["license"])
        self.assertEqual({}, sbom["dependencies"])
        self.assertEqual({}, sbom["devDependencies"])
        self.assertEqual("package.json", sbom["foundAt"])

    def test_auditpipe_pipes_manifest_extract_sbom_degraded(self):
        expected = {"error": "No package.json found in repository"}
        self.assertEqual(expected, manifest.extract_sbom(None, self.root_dir))

        manifest_location = self.root_dir / "package.json"
        manifest_location.write_text("{invalid")
        sbom = manifest.extract_sbom(manifest_location, self.root_dir)
        self.assertEqual("SBOM generation failed", sbom["error"])
        self.assertIn("details", sbom)
        self.assertNotIn("dependencies", sbom)
