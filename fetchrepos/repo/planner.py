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
Decide whether each repository is cloned or fetched.
"""
import enum
import os
from dataclasses import dataclass
from pathlib import Path

from fetchrepos.util.path import PathLike

from .descriptor import URL, RepoDescriptor


class Action(enum.Enum):
    """
    The operation performed for a repository.
    """

    CLONE = "clone"
    """
    Create a new local working copy from the remote URL.
    """
    FETCH = "fetch"
    """
    Refresh every remote-tracking reference of an existing copy.
    """


@dataclass(frozen=True)
class Job:
    """
    One repository's clone-or-fetch unit of work.
    """

    descriptor: RepoDescriptor
    path: Path
    """
    The location of the local working copy.
    """
    action: Action

    @property
    def name(self) -> str:
        """
        Get the name of the repository.
        """
        return self.descriptor.name

    @property
    def url(self) -> URL:
        """
        Get the URL from which the repository is cloned.
        """
        return self.descriptor.url

    def __str__(self) -> str:  # noqa: D105
        return f"{self.action.value} {self.name}"


def plan(descriptor: RepoDescriptor, root: PathLike = os.curdir) -> Job:
    """
    Create the job that synchronizes a repository.

    The check for an existing working copy is not atomic with respect to
    other processes modifying `root`.

    Parameters
    ----------
    descriptor : RepoDescriptor
        The repository.
    root : PathLike, optional
        The directory containing local working copies, by default the
        current working directory.

    Returns
    -------
    Job
        A fetch job if ``root / descriptor.name`` exists or a clone job
        otherwise.
    """
    path = Path(root) / descriptor.name
    action = Action.FETCH if path.exists() else Action.CLONE
    return Job(descriptor, path, action)
