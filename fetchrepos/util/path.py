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
General utilities and type aliases for system paths.
"""

import os
import pathlib
import typing

PathLike = typing.Union[str, os.PathLike, pathlib.Path]


def expand(path: PathLike) -> pathlib.Path:
    """
    Expand a user-supplied path.

    Parameters
    ----------
    path : PathLike
        A path that may contain a leading ``~`` or environment
        variables such as ``$HOME``.

    Returns
    -------
    pathlib.Path
        The expanded path.
        Relative paths remain relative to the current working
        directory.
    """
    return pathlib.Path(os.path.expandvars(os.path.expanduser(str(path))))
