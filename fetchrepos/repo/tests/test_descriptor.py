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
Test suite for `fetchrepos.repo.descriptor`.
"""
import dataclasses
import unittest

from fetchrepos.repo.descriptor import (
    RepoDescriptor,
    Transport,
    extract_name,
    https_clone_url,
)
from fetchrepos.repo.exception import ParseError


class TestExtractName(unittest.TestCase):
    """
    Test derivation of repository names from URLs.
    """

    def test_ssh_url(self):
        """
        Verify that the final path segment is kept without ``.git``.
        """
        self.assertEqual(
            extract_name("git@github.com:owner/hackers.example.com.git"),
            "hackers.example.com")
        self.assertEqual(extract_name("git@host:org/repo.git"), "repo")

    def test_https_url(self):
        """
        Verify that HTTPS URLs with or without ``.git`` are supported.
        """
        self.assertEqual(
            extract_name("https://github.com/owner/cli-kneeboard.git"),
            "cli-kneeboard")
        self.assertEqual(
            extract_name("https://github.com/owner/cli-kneeboard"),
            "cli-kneeboard")

    def test_strips_one_suffix(self):
        """
        Verify that exactly one trailing ``.git`` is removed.
        """
        self.assertEqual(extract_name("git@host:org/repo.git.git"), "repo.git")
        self.assertEqual(extract_name("git@host:org/.github.git"), ".github")
        self.assertEqual(extract_name("git@host:org/git"), "git")

    def test_deterministic(self):
        """
        Verify that the same URL always yields the same name.
        """
        url = "git@github.com:owner/Github-fetch-repos.git"
        self.assertEqual(extract_name(url), extract_name(url))
        self.assertEqual(extract_name(url), "Github-fetch-repos")


class TestRepoDescriptor(unittest.TestCase):
    """
    Test construction of `RepoDescriptor`.
    """

    def test_from_urls(self):
        """
        Verify that the name is derived from the SSH URL.
        """
        repo = RepoDescriptor.from_urls(
            "git@github.com:owner/cli-kneeboard.git",
            "https://github.com/owner/cli-kneeboard.git")
        self.assertEqual(
            repo,
            RepoDescriptor(
                "cli-kneeboard",
                "git@github.com:owner/cli-kneeboard.git",
                "https://github.com/owner/cli-kneeboard.git",
                Transport.SSH))
        self.assertEqual(repo.url, "git@github.com:owner/cli-kneeboard.git")

    def test_https_transport(self):
        """
        Verify that the HTTPS transport selects the HTTPS URL.
        """
        repo = RepoDescriptor.from_urls(
            "git@github.com:owner/repo.git",
            "https://github.com/owner/repo.git",
            Transport.HTTPS)
        self.assertEqual(repo.url, "https://github.com/owner/repo.git")
        with self.assertRaises(ParseError):
            RepoDescriptor.from_urls(
                "git@github.com:owner/repo.git",
                transport=Transport.HTTPS)

    def test_empty_name(self):
        """
        Verify that a URL without a name is rejected.
        """
        with self.assertRaises(ParseError):
            RepoDescriptor.from_urls("git@github.com:owner/")
        with self.assertRaises(ParseError):
            RepoDescriptor.from_urls(".git")

    def test_immutable(self):
        """
        Verify that descriptors cannot be modified.
        """
        repo = RepoDescriptor.from_urls("git@host:org/repo.git")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            repo.name = "other"  # type: ignore[misc]

    def test_https_clone_url(self):
        """
        Verify conversion of web URLs to clone URLs.
        """
        self.assertEqual(
            https_clone_url("https://github.com/owner/repo"),
            "https://github.com/owner/repo.git")
        self.assertEqual(
            https_clone_url("https://github.com/owner/repo.git"),
            "https://github.com/owner/repo.git")


if __name__ == '__main__':
    unittest.main()
