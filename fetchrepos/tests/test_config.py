#
# Copyright (c) 2023 Radiance Technologies, Inc.
#
# This file is part of fetch-repos
# (see https://github.com/orgs/Radiance-Technologies/fetch-repos).
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program. If not, see
# <http://www.gnu.org/licenses/>.
#
"""
Test suite for `fetchrepos.config`.
"""
import tempfile
import unittest
from pathlib import Path

from fetchrepos.config import SyncConfig
from fetchrepos.repo.descriptor import Transport
from fetchrepos.repo.download import GitPythonBackend, SubprocessBackend
from fetchrepos.repo.exception import ConfigError
from fetchrepos.repo.source import GitHubCLISource, JSONFileSource


class TestSyncConfig(unittest.TestCase):
    """
    Test configuration defaults, validation, and loading.
    """

    def setUp(self):
        """
        Create a directory for configuration files.
        """
        self._tmpdir = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmpdir.name)

    def tearDown(self):
        """
        Remove configuration files.
        """
        self._tmpdir.cleanup()

    def _write(self, text: str) -> str:
        path = self.dir / "fetch-repos.yaml"
        path.write_text(text)
        return str(path)

    def test_defaults(self):
        """
        Verify the default configuration.
        """
        config = SyncConfig().validate()
        self.assertEqual(config.max_jobs, 5)
        self.assertIs(config.transport, Transport.SSH)
        self.assertIsNone(config.exclude)
        self.assertEqual(config.limit, 1000)
        self.assertIsInstance(config.make_source(), GitHubCLISource)
        self.assertIsInstance(config.make_backend(), SubprocessBackend)

    def test_validate(self):
        """
        Verify that invalid settings are configuration errors.
        """
        invalid = [
            SyncConfig(max_jobs=10),
            SyncConfig(max_jobs=12),
            SyncConfig(max_jobs=0),
            SyncConfig(limit=0),
            SyncConfig(backend="svn"),
        ]
        for config in invalid:
            with self.subTest(config=config):
                with self.assertRaises(ConfigError):
                    config.validate()
        with self.assertRaises(ConfigError):
            SyncConfig(transport="ftp")  # type: ignore[arg-type]

    def test_from_yaml(self):
        """
        Verify that YAML values are normalized.
        """
        path = self._write(
            "owner: octo-org\n"
            "max-jobs: 3\n"
            "transport: HTTPS\n"
            "exclude: test, old\n"
            "backend: gitpython\n")
        config = SyncConfig.from_yaml(path).validate()
        self.assertEqual(config.owner, "octo-org")
        self.assertEqual(config.max_jobs, 3)
        self.assertIs(config.transport, Transport.HTTPS)
        self.assertEqual(config.exclude, ["test", "old"])
        self.assertIsInstance(config.make_backend(), GitPythonBackend)

    def test_from_yaml_errors(self):
        """
        Verify that unusable configuration files are rejected.
        """
        for text in ("colour: blue\n", "- a\n- b\n", "owner: [unclosed\n"):
            with self.subTest(text=text):
                with self.assertRaises(ConfigError):
                    SyncConfig.from_yaml(self._write(text))
        with self.assertRaises(ConfigError):
            SyncConfig.from_yaml(str(self.dir / "missing.yaml"))
        self.assertEqual(SyncConfig.from_yaml(self._write("")), SyncConfig())

    def test_from_yaml_wrong_types(self):
        """
        Verify that values of the wrong type are configuration errors.
        """
        for text in ("directory: null\n",
                     "directory: 7\n",
                     "exclude: [test, 42]\n",
                     "exclude: 42\n",
                     "owner: 123\n",
                     "source_file: [a.json]\n",
                     "transport: 5\n",
                     "dry_run: maybe\n",
                     "backend: [subprocess]\n"):
            with self.subTest(text=text):
                config = SyncConfig.from_yaml(self._write(text))
                with self.assertRaises(ConfigError):
                    config.validate()
        config = SyncConfig.from_yaml(
            self._write("owner: null\nsource_file: null\nexclude: null\n"))
        self.assertEqual(config.validate(), SyncConfig())

    def test_updated(self):
        """
        Verify that only given overrides replace values.
        """
        config = SyncConfig(owner="octo-org", max_jobs=3)
        updated = config.updated({"owner": None, "max_jobs": 7, "dry_run": True})
        self.assertEqual(updated.owner, "octo-org")
        self.assertEqual(updated.max_jobs, 7)
        self.assertTrue(updated.dry_run)
        self.assertEqual(config.max_jobs, 3)

    def test_source_file(self):
        """
        Verify that a listing file replaces the ``gh`` invocation.
        """
        config = SyncConfig(source_file="~/repos.json", transport=Transport.HTTPS)
        source = config.make_source()
        self.assertIsInstance(source, JSONFileSource)
        self.assertIs(source.transport, Transport.HTTPS)
        self.assertEqual(source.path, Path("~/repos.json").expanduser())


if __name__ == '__main__':
    unittest.main()
