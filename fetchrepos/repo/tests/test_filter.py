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
Test suite for `fetchrepos.repo.filter`.
"""
import unittest

from fetchrepos.repo.descriptor import RepoDescriptor
from fetchrepos.repo.filter import filter_descriptors, is_excluded, split_patterns


def _repos(*names):
    return [RepoDescriptor.from_urls(f"git@host:org/{n}.git") for n in names]


class TestFilter(unittest.TestCase):
    """
    Test exclusion of repositories by name.
    """

    def test_no_patterns(self):
        """
        Verify that the input is returned unchanged without patterns.
        """
        repos = _repos("alpha", "beta-test", "Gamma")
        self.assertEqual(filter_descriptors(repos), repos)
        self.assertEqual(filter_descriptors(repos, None), repos)
        self.assertEqual(filter_descriptors(repos, []), repos)

    def test_exclude(self):
        """
        Verify that matching names are removed in order.
        """
        repos = _repos("alpha", "beta-test", "Gamma")
        result = filter_descriptors(repos, ["test"])
        self.assertEqual([r.name for r in result], ["alpha", "Gamma"])

    def test_case_insensitive(self):
        """
        Verify that case is ignored on both sides.
        """
        repos = _repos("Github-fetch-repos", "other")
        self.assertTrue(is_excluded("Github-fetch-repos", ["github-fetch-repos"]))
        result = filter_descriptors(repos, ["GAMMA", "GITHUB"])
        self.assertEqual([r.name for r in result], ["other"])

    def test_any_pattern_excludes(self):
        """
        Verify that matching any one pattern is enough.
        """
        repos = _repos("alpha", "beta", "gamma", "delta")
        result = filter_descriptors(repos, ["alp", "mm", "zzz"])
        self.assertEqual([r.name for r in result], ["beta", "delta"])

    def test_subset(self):
        """
        Verify that the result excludes exactly the matching names.
        """
        repos = _repos("docs", "docs-old", "api", "web", "old-api")
        patterns = ["old"]
        result = filter_descriptors(repos, patterns)
        self.assertTrue(all(r in repos for r in result))
        excluded = [r for r in repos if r not in result]
        self.assertTrue(all(is_excluded(r.name, patterns) for r in excluded))
        self.assertFalse(any(is_excluded(r.name, patterns) for r in result))

    def test_empty_pattern(self):
        """
        Verify that an empty pattern excludes everything.
        """
        self.assertEqual(filter_descriptors(_repos("a", "b"), [""]), [])

    def test_split_patterns(self):
        """
        Verify parsing of comma-delimited pattern lists.
        """
        self.assertIsNone(split_patterns(None))
        self.assertEqual(split_patterns("test, old ,,tmp"), ["test", "old", "tmp"])
        self.assertEqual(split_patterns(""), [])


if __name__ == '__main__':
    unittest.main()
