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
Provides general-purpose exception utilities.
"""

import traceback
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


@dataclass
class Except(Generic[T]):
    """
    A (return) value paired with an exception for delayed handling.
    """

    value: Optional[T]
    """
    A return value preempted by an exception.

    If None, then the exception was likely raised before any return
    value was computed.
    """
    exception: Exception
    """
    An exception raised during the computation of `value`.
    """
    trace: str
    """
    The stack trace of the exception.
    """

    @classmethod
    def capture(cls, exc: Exception, value: Optional[T] = None) -> 'Except[T]':
        """
        Record an exception that is currently being handled.

        Must be called from within an ``except`` block so that the
        formatted trace refers to `exc`.
        """
        return cls(value, exc, traceback.format_exc())

    def __str__(self) -> str:  # noqa: D105
        return str(self.exception) or type(self.exception).__name__
