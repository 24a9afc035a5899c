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
Completion accounting shared by the jobs of a batch.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

import tqdm

from fetchrepos.util.logging import default_log_level

logger: logging.Logger = logging.getLogger(__name__)
logger.setLevel(default_log_level())


@dataclass
class ProgressState:
    """
    The number of completed jobs out of the total in a batch.
    """

    completed: int
    """
    The number of jobs that have finished, successfully or not.

    Never decreases and never exceeds `total`.
    """
    total: int
    """
    The number of jobs in the batch, fixed when the batch starts.
    """

    @property
    def remaining(self) -> int:
        """
        Get the number of jobs that have not yet finished.
        """
        return self.total - self.completed

    @property
    def is_drained(self) -> bool:
        """
        Return whether every job has finished.
        """
        return self.completed == self.total


class ProgressTracker:
    """
    Counts job completions and reports each one.

    Increments are atomic with respect to both coroutines and threads.
    """

    def __init__(self, total: int, progress_bar: bool = False) -> None:
        """
        Start tracking a batch.

        Parameters
        ----------
        total : int
            The number of jobs in the batch.
        progress_bar : bool, optional
            If True, render completions with a ``tqdm`` progress bar in
            addition to logging them, by default False.
        """
        if total < 0:
            raise ValueError(f"Total must be nonnegative, got {total}")
        self.state = ProgressState(0, total)
        self._lock = threading.Lock()
        self._pbar: Optional[tqdm.tqdm] = None
        if progress_bar:
            self._pbar = tqdm.tqdm(total=total, desc="Repositories", unit="repo")

    def increment(self) -> Tuple[int, int]:
        """
        Atomically record one completion.

        Returns
        -------
        Tuple[int, int]
            The completed count including this completion and the
            total.

        Raises
        ------
        RuntimeError
            If more completions are recorded than there are jobs.
        """
        with self._lock:
            if self.state.completed >= self.state.total:
                raise RuntimeError(
                    f"All {self.state.total} jobs have already completed")
            self.state.completed += 1
            return self.state.completed, self.state.total

    def report(self, name: str, succeeded: bool = True) -> Tuple[int, int]:
        """
        Record and log the completion of the named job.

        Parameters
        ----------
        name : str
            The name of the repository whose job finished.
        succeeded : bool, optional
            Whether the job succeeded, by default True.

        Returns
        -------
        Tuple[int, int]
            The completed count including this completion and the
            total.
        """
        completed, total = self.increment()
        status = "Finished" if succeeded else "Failed"
        logger.info(f"[{completed}/{total}] {status} {name}")
        if self._pbar is not None:
            self._pbar.update(1)
        return completed, total

    def close(self) -> None:
        """
        Release the progress bar, if any.
        """
        if self._pbar is not None:
            self._pbar.close()
            self._pbar = None
