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
Bounded-parallelism execution of jobs.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import (
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    List,
    Sequence,
    TypeVar,
    Union,
)

from fetchrepos.repo.exception import ConfigError
from fetchrepos.repo.planner import Job
from fetchrepos.util.exception import Except
from fetchrepos.util.logging import default_log_level, log_and_raise

logger: logging.Logger = logging.getLogger(__name__)
logger.setLevel(default_log_level())

MAX_CONCURRENCY = 10
"""
Exclusive upper bound on the number of concurrent jobs.
"""
DEFAULT_CONCURRENCY = 5

T = TypeVar('T')


def validate_concurrency(max_jobs: int) -> int:
    """
    Check that a concurrency cap is within ``[1, MAX_CONCURRENCY)``.

    Returns
    -------
    int
        `max_jobs`, if valid.

    Raises
    ------
    ConfigError
        If `max_jobs` is out of range.
    """
    if isinstance(max_jobs, bool) or not isinstance(max_jobs, int):
        log_and_raise(
            logger,
            f"Maximum job count must be an integer, got {max_jobs!r}",
            ConfigError)
    if max_jobs < 1 or max_jobs >= MAX_CONCURRENCY:
        log_and_raise(
            logger,
            f"Maximum job count must be between 1 and {MAX_CONCURRENCY - 1}, "
            f"got {max_jobs}",
            ConfigError)
    return max_jobs


class PermitPool:
    """
    A fixed number of execution permits.

    Permits are only handed out through `permit`, which returns them on
    every exit path.
    """

    def __init__(self, size: int) -> None:
        self.size = size
        self._semaphore = asyncio.Semaphore(size)
        self._held = 0
        self._peak = 0

    @property
    def held(self) -> int:
        """
        Get the number of permits currently held.
        """
        return self._held

    @property
    def peak(self) -> int:
        """
        Get the greatest number of permits ever held at once.
        """
        return self._peak

    @asynccontextmanager
    async def permit(self) -> AsyncIterator[None]:
        """
        Hold one permit for the duration of the context.

        Suspends until a permit is available.
        """
        async with self._semaphore:
            self._held += 1
            self._peak = max(self._peak, self._held)
            try:
                yield
            finally:
                self._held -= 1


class ConcurrencyController(Generic[T]):
    """
    Runs every job exactly once with at most `max_jobs` at a time.

    A job that raises does not affect any other job; its exception is
    logged and returned in place of its result.
    """

    def __init__(self, max_jobs: int = DEFAULT_CONCURRENCY) -> None:
        """
        Initialize the controller.

        Parameters
        ----------
        max_jobs : int, optional
            The number of permits, by default ``DEFAULT_CONCURRENCY``.

        Raises
        ------
        ConfigError
            If `max_jobs` is not in ``[1, MAX_CONCURRENCY)``.
        """
        self.max_jobs = validate_concurrency(max_jobs)
        self.permits = PermitPool(self.max_jobs)

    async def _run_one(
            self,
            job: Job,
            worker: Callable[[Job],
                             Awaitable[T]]) -> Union[T,
                                                     Except[T]]:
        async with self.permits.permit():
            try:
                return await worker(job)
            except Exception as e:
                failure: Except[T] = Except.capture(e)
                job_logger = logger.getChild(job.name)
                job_logger.error(f"Failed to {job}: {failure}")
                job_logger.debug(failure.trace)
                return failure

    async def run(
            self,
            jobs: Sequence[Job],
            worker: Callable[[Job],
                             Awaitable[T]]) -> List[Union[T,
                                                          Except[T]]]:
        """
        Execute `worker` once per job.

        All jobs are submitted immediately and wait for a permit before
        `worker` is called.
        Completion order is unspecified.

        Parameters
        ----------
        jobs : Sequence[Job]
            The jobs to run.
        worker : Callable[[Job], Awaitable[T]]
            A coroutine function performing a single job.

        Returns
        -------
        List[Union[T, Except[T]]]
            The result of each job in the order of `jobs`, or an
            `Except` record if the job raised an exception.
        """
        return list(
            await asyncio.gather(
                *(self._run_one(job,
                                worker) for job in jobs)))
