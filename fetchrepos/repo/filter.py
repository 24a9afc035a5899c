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
Exclusion of repositories by name.
"""
from typing import Iterable, List, Optional, Sequence

from .descriptor import RepoDescriptor


def is_excluded(name: str, patterns: Iterable[str]) -> bool:
    """
    Return whether `name` contains any of the given patterns.

    The comparison is case-insensitive.
    """
    name = name.lower()
    return any(pattern.lower() in name for pattern in patterns)


def filter_descriptors(
        descriptors: Sequence[RepoDescriptor],
        exclude_patterns: Optional[Iterable[str]] = None
) -> List[RepoDescriptor]:
    """
    Drop the descriptors whose names match any exclusion pattern.

    Parameters
    ----------
    descriptors : Sequence[RepoDescriptor]
        The candidate repositories.
    exclude_patterns : Optional[Iterable[str]], optional
        Substrings matched case-insensitively against each repository
        name.
        An empty pattern matches every name.
        If None, then nothing is excluded.

    Returns
    -------
    List[RepoDescriptor]
        The descriptors that match none of the patterns in their
        original order.

    Examples
    --------
    >>> repos = [
    ...     RepoDescriptor.from_urls(f"git@host:org/{n}.git")
    ...     for n in ("alpha", "beta-test", "Gamma")]
    >>> [r.name for r in filter_descriptors(repos, ["TEST"])]
    ['alpha', 'Gamma']
    """
    if exclude_patterns is None:
        return list(descriptors)
    patterns = list(exclude_patterns)
    return [d for d in descriptors if not is_excluded(d.name, patterns)]


def split_patterns(value: Optional[str]) -> Optional[List[str]]:
    """
    Split a comma-delimited list of exclusion patterns.

    Surrounding whitespace is stripped and empty entries are dropped.
    None is returned unchanged.
    """
    if value is None:
        return None
    return [p.strip() for p in value.split(",") if p.strip()]
