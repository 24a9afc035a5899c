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
Sources of repository listings.

A listing is a JSON array of objects in the format produced by
``gh repo list --json sshUrl,url``.
"""
import asyncio
import json
import logging
from typing import List, Optional, Protocol, Union, runtime_checkable

from fetchrepos.util.logging import default_log_level, log_and_raise
from fetchrepos.util.path import PathLike

from .descriptor import RepoDescriptor, Transport, https_clone_url
from .exception import ParseError, SourceRetrievalError

logger: logging.Logger = logging.getLogger(__name__)
logger.setLevel(default_log_level())

SSH_URL_FIELD = "sshUrl"
WEB_URL_FIELD = "url"
DEFAULT_LIMIT = 1000


@runtime_checkable
class RepoSource(Protocol):
    """
    Supplies the descriptors of the repositories in a batch.
    """

    async def list_repositories(self) -> List[RepoDescriptor]:
        """
        Retrieve and parse the repository listing.

        Raises
        ------
        SourceRetrievalError
            If the listing cannot be retrieved.
        ParseError
            If the listing is malformed.
        """
        ...


def parse_listing(
        payload: Union[str,
                       bytes],
        transport: Transport = Transport.SSH) -> List[RepoDescriptor]:
    """
    Parse a JSON repository listing into descriptors.

    Parameters
    ----------
    payload : Union[str, bytes]
        A JSON array of objects, each with at least an ``sshUrl``
        string field.
        An object must also have a ``url`` string field if `transport`
        is `Transport.HTTPS`.
    transport : Transport, optional
        The transport selected for the batch, by default
        `Transport.SSH`.

    Returns
    -------
    List[RepoDescriptor]
        One descriptor per object in listing order.

    Raises
    ------
    ParseError
        If the payload is not valid JSON, is not an array of objects,
        or if any object lacks a required field.
    """
    try:
        entries = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Repository listing is not valid JSON: {e}") from e
    if not isinstance(entries, list):
        raise ParseError(
            "Repository listing must be a JSON array, "
            f"got {type(entries).__name__}")
    descriptors = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ParseError(f"Listing entry {i} is not a JSON object: {entry!r}")
        ssh_url = entry.get(SSH_URL_FIELD)
        if not isinstance(ssh_url, str):
            raise ParseError(
                f"Listing entry {i} has no '{SSH_URL_FIELD}' string field: "
                f"{entry!r}")
        web_url = entry.get(WEB_URL_FIELD)
        if web_url is not None and not isinstance(web_url, str):
            raise ParseError(
                f"Listing entry {i} has a non-string '{WEB_URL_FIELD}' field: "
                f"{entry!r}")
        if transport is Transport.HTTPS and not web_url:
            raise ParseError(
                f"Listing entry {i} has no '{WEB_URL_FIELD}' field "
                "required by the HTTPS transport: "
                f"{entry!r}")
        https_url = https_clone_url(web_url) if web_url else None
        descriptors.append(
            RepoDescriptor.from_urls(ssh_url,
                                     https_url,
                                     transport))
    return descriptors


class GitHubCLISource:
    """
    Lists repositories with the GitHub command line client, ``gh``.

    The client must be installed and authenticated.
    """

    def __init__(
            self,
            owner: Optional[str] = None,
            limit: int = DEFAULT_LIMIT,
            transport: Transport = Transport.SSH,
            executable: str = "gh") -> None:
        """
        Configure the listing command.

        Parameters
        ----------
        owner : Optional[str], optional
            The organization or user whose repositories are listed.
            If None, then the authenticated user's repositories are
            listed.
        limit : int, optional
            The maximum number of repositories to list, by default
            ``DEFAULT_LIMIT``.
        transport : Transport, optional
            The transport selected for the batch.
        executable : str, optional
            The name or path of the ``gh`` executable.
        """
        self.owner = owner
        self.limit = limit
        self.transport = transport
        self.executable = executable

    @property
    def command(self) -> List[str]:
        """
        Get the listing command line.
        """
        cmd = [self.executable, "repo", "list"]
        if self.owner:
            cmd.append(self.owner)
        cmd.extend(
            [
                "--json",
                f"{SSH_URL_FIELD},{WEB_URL_FIELD}",
                "-L",
                str(self.limit)
            ])
        return cmd

    async def list_repositories(self) -> List[RepoDescriptor]:  # noqa: D102
        cmd = self.command
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE)
        except OSError as e:
            log_and_raise(
                logger,
                f"Failed to execute {cmd[0]}: {e}",
                SourceRetrievalError)
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            log_and_raise(
                logger,
                f"'{' '.join(cmd)}' failed with status {proc.returncode}: "
                f"{stderr.decode(errors='replace').strip()}",
                SourceRetrievalError)
        return parse_listing(stdout, self.transport)


class JSONFileSource:
    """
    Reads a repository listing that was saved to a file.
    """

    def __init__(
            self,
            path: PathLike,
            transport: Transport = Transport.SSH) -> None:
        self.path = path
        self.transport = transport

    async def list_repositories(self) -> List[RepoDescriptor]:  # noqa: D102
        try:
            with open(self.path, "rb") as f:
                payload = f.read()
        except OSError as e:
            log_and_raise(
                logger,
                f"Failed to read repository listing {self.path}: {e}",
                SourceRetrievalError)
        return parse_listing(payload, self.transport)
