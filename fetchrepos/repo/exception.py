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
Defines exceptions related to repository synchronization.
"""

from typing import Optional, Sequence


class FatalSyncError(Exception):
    """
    Exception indicating that a batch cannot proceed at all.

    Fatal errors are raised before any job has been dispatched.
    """

    pass


class SourceRetrievalError(FatalSyncError):
    """
    Exception indicating that the repository listing could not be read.

    Raised when the listing command cannot be launched or exits with a
    nonzero status, or when a listing file cannot be read.
    """

    pass


class ParseError(FatalSyncError):
    """
    Exception indicating that a repository listing is malformed.

    For example, the payload is not valid JSON or an entry lacks its
    SSH URL.
    """

    pass


class ConfigError(FatalSyncError):
    """
    Exception indicating an invalid configuration.

    For example, the requested number of concurrent jobs exceeds the
    hard limit.
    """

    pass


class JobError(Exception):
    """
    Exception indicating that a single clone or fetch has failed.

    Job errors are recoverable; they do not abort sibling jobs or the
    batch.
    """

    def __init__(
            self,
            name: str,
            command: Sequence[str],
            return_code: Optional[int],
            cause: str = "") -> None:
        super().__init__(name, command, return_code, cause)
        self.name = name
        self.command = tuple(command)
        self.return_code = return_code
        self.cause = cause

    def __str__(self) -> str:  # noqa: D105
        command = " ".join(self.command)
        if self.return_code is None:
            msg = f"[{self.name}] failed to launch '{command}'"
        else:
            msg = (
                f"[{self.name}] '{command}' exited with status "
                f"{self.return_code}")
        if self.cause:
            msg = f"{msg}: {self.cause}"
        return msg
