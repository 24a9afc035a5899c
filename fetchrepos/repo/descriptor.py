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
Immutable records identifying remote repositories.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from .exception import ParseError

URL = str

_GIT_SUFFIX = ".git"


class Transport(enum.Enum):
    """
    The URL scheme used to reach a repository.
    """

    SSH = "ssh"
    HTTPS = "https"

    def __str__(self) -> str:  # noqa: D105
        return self.value


def extract_name(url: URL) -> str:
    """
    Get the repository name from its URL.

    The name is the final ``/``-delimited segment of the URL with one
    trailing ``.git`` removed.

    Parameters
    ----------
    url : URL
        An SSH (``git@host:owner/repo.git``) or HTTPS URL.

    Returns
    -------
    str
        The name of the repository.

    Examples
    --------
    >>> extract_name("git@github.com:owner/hackers.example.com.git")
    'hackers.example.com'
    >>> extract_name("https://github.com/owner/repo.git.git")
    'repo.git'
    """
    name = url.strip().rsplit("/", 1)[-1]
    if name.endswith(_GIT_SUFFIX):
        name = name[:-len(_GIT_SUFFIX)]
    return name


def https_clone_url(web_url: URL) -> URL:
    """
    Convert the web URL of a repository into its HTTPS clone URL.
    """
    web_url = web_url.strip()
    if web_url.endswith(_GIT_SUFFIX):
        return web_url
    return web_url + _GIT_SUFFIX


@dataclass(frozen=True)
class RepoDescriptor:
    """
    A remote repository and the means by which to reach it.
    """

    name: str
    """
    The name of the repository and of its local working copy.
    """
    ssh_url: URL
    """
    The SSH clone URL.
    """
    https_url: Optional[URL] = None
    """
    The HTTPS clone URL, if known.
    """
    transport: Transport = Transport.SSH
    """
    The transport selected for the batch that produced this descriptor.
    """

    def __post_init__(self) -> None:
        """
        Verify that the selected transport has a URL.
        """
        if self.transport is Transport.HTTPS and not self.https_url:
            raise ParseError(
                f"Repository {self.name} has no HTTPS URL "
                "but the HTTPS transport was requested")

    @property
    def url(self) -> URL:
        """
        Get the URL selected by the descriptor's transport.
        """
        if self.transport is Transport.HTTPS:
            assert self.https_url is not None
            return self.https_url
        return self.ssh_url

    @classmethod
    def from_urls(
            cls,
            ssh_url: URL,
            https_url: Optional[URL] = None,
            transport: Transport = Transport.SSH) -> 'RepoDescriptor':
        """
        Create a descriptor whose name is derived from its SSH URL.

        Parameters
        ----------
        ssh_url : URL
            The SSH clone URL.
        https_url : Optional[URL], optional
            The HTTPS clone URL, by default None.
        transport : Transport, optional
            The transport to use, by default `Transport.SSH`.

        Returns
        -------
        RepoDescriptor
            The descriptor.

        Raises
        ------
        ParseError
            If no name can be derived from `ssh_url` or if the HTTPS
            transport is requested without an HTTPS URL.
        """
        ssh_url = ssh_url.strip()
        name = extract_name(ssh_url)
        if not name:
            raise ParseError(f"Cannot derive a repository name from '{ssh_url}'")
        return cls(name, ssh_url, https_url, transport)
