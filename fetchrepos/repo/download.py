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
Module for downloading repositories.
"""
import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Protocol, Type, runtime_checkable

import git
from git.repo import Repo

from fetchrepos.util.logging import default_log_level
from fetchrepos.util.path import PathLike

from .descriptor import URL
from .exception import JobError

logger: logging.Logger = logging.getLogger(__name__)
logger.setLevel(default_log_level())


@runtime_checkable
class ExecutionBackend(Protocol):
    """
    Performs the transfers behind clone and fetch jobs.
    """

    async def clone(self, url: URL, path: PathLike) -> None:
        """
        Clone the repository at `url` into the new directory `path`.

        Raises
        ------
        JobError
            If the clone cannot be started or fails.
        """
        ...

    async def fetch(self, path: PathLike) -> None:
        """
        Fetch all remotes of the working copy at `path`.

        Raises
        ------
        JobError
            If the fetch cannot be started or fails.
        """
        ...


class SubprocessBackend:
    """
    Runs the ``git`` executable for each transfer.

    The standard output and error streams of ``git`` are inherited from
    the current process so that its progress remains visible.
    """

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable

    def clone_command(self, url: URL, path: PathLike) -> List[str]:
        """
        Get the command line that clones `url` into `path`.
        """
        return [self.executable, "clone", url, str(path)]

    def fetch_command(self, path: PathLike) -> List[str]:
        """
        Get the command line that fetches all remotes of `path`.
        """
        return [self.executable, "-C", str(path), "fetch", "--all"]

    async def _run(self, name: str, cmd: List[str]) -> None:
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            proc = await asyncio.create_subprocess_exec(*cmd)
        except OSError as e:
            raise JobError(name, cmd, None, str(e)) from e
        returncode = await proc.wait()
        if returncode != 0:
            raise JobError(name, cmd, returncode)

    async def clone(self, url: URL, path: PathLike) -> None:  # noqa: D102
        await self._run(Path(path).name, self.clone_command(url, path))

    async def fetch(self, path: PathLike) -> None:  # noqa: D102
        await self._run(Path(path).name, self.fetch_command(path))


class GitPythonBackend:
    """
    Uses GitPython for each transfer.

    GitPython blocks, so each transfer runs in a worker thread.
    Output of ``git`` is captured rather than passed through and is
    included in the raised `JobError`.
    """

    @staticmethod
    def _clone(url: URL, path: PathLike) -> None:
        Repo.clone_from(url, str(path))

    @staticmethod
    def _fetch(path: PathLike) -> None:
        repo = Repo(str(path))
        repo.git.fetch("--all")

    async def clone(self, url: URL, path: PathLike) -> None:  # noqa: D102
        try:
            await asyncio.to_thread(self._clone, url, path)
        except git.CommandError as e:
            raise JobError(
                Path(path).name,
                ["git", "clone", url, str(path)],
                e.status if isinstance(e.status, int) else None,
                str(e.stderr).strip()) from e

    async def fetch(self, path: PathLike) -> None:  # noqa: D102
        cmd = ["git", "-C", str(path), "fetch", "--all"]
        try:
            await asyncio.to_thread(self._fetch, path)
        except git.CommandError as e:
            raise JobError(
                Path(path).name,
                cmd,
                e.status if isinstance(e.status, int) else None,
                str(e.stderr).strip()) from e
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise JobError(
                Path(path).name,
                cmd,
                None,
                f"not a Git working copy: {e}") from e


BACKENDS: Dict[str, Type[ExecutionBackend]] = {
    "subprocess": SubprocessBackend,
    "gitpython": GitPythonBackend,
}
"""
Execution backends by the name used in configuration.
"""


def make_backend(name: str) -> ExecutionBackend:
    """
    Instantiate a backend by name.

    Raises
    ------
    KeyError
        If `name` does not name a backend in `BACKENDS`.
    """
    return BACKENDS[name]()
