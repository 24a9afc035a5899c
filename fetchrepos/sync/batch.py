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
Synchronize a batch of repositories.

A batch moves through the states of `BatchState` in order: jobs are
planned from the filtered descriptors, dispatched to a
`ConcurrencyController`, run, and finally drained once every job has
completed.
Individual job failures are logged and reported but never abort the
batch.
"""
import enum
import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, TextIO

from fetchrepos.repo.descriptor import RepoDescriptor
from fetchrepos.repo.download import ExecutionBackend
from fetchrepos.repo.filter import filter_descriptors
from fetchrepos.repo.planner import Action, Job, plan
from fetchrepos.repo.source import RepoSource
from fetchrepos.util.exception import Except
from fetchrepos.util.logging import default_log_level
from fetchrepos.util.path import PathLike, expand

from .controller import DEFAULT_CONCURRENCY, ConcurrencyController
from .progress import ProgressTracker

if TYPE_CHECKING:
    from fetchrepos.config import SyncConfig

logger: logging.Logger = logging.getLogger(__name__)
logger.setLevel(default_log_level())


class BatchState(enum.Enum):
    """
    The lifecycle of a batch.
    """

    PLANNING = enum.auto()
    """
    Jobs are being built from the filtered descriptors.
    """
    DISPATCHING = enum.auto()
    """
    Jobs are being submitted to the controller.
    """
    RUNNING = enum.auto()
    """
    At least one job has not yet completed.
    """
    DRAINED = enum.auto()
    """
    Every job has completed.
    """


@dataclass
class BatchReport:
    """
    The outcome of a batch.
    """

    total: int
    """
    The number of repositories selected after filtering.
    """
    completed: int = 0
    """
    The number of jobs that ran to completion, successfully or not.
    """
    failures: Dict[str, Except[None]] = field(default_factory=dict)
    """
    The failure of each unsuccessful job by repository name.
    """
    dry_run: bool = False
    """
    Whether the batch only listed repositories.
    """

    @property
    def succeeded(self) -> int:
        """
        Get the number of jobs that completed without error.
        """
        return self.completed - len(self.failures)


class Batch:
    """
    One synchronization of a set of repositories.
    """

    def __init__(
            self,
            descriptors: Sequence[RepoDescriptor],
            backend: ExecutionBackend,
            max_jobs: int = DEFAULT_CONCURRENCY,
            root: PathLike = os.curdir,
            progress_bar: bool = False) -> None:
        """
        Prepare a batch.

        Parameters
        ----------
        descriptors : Sequence[RepoDescriptor]
            The repositories to synchronize, already filtered.
        backend : ExecutionBackend
            Performs each clone or fetch.
        max_jobs : int, optional
            The concurrency cap, by default ``DEFAULT_CONCURRENCY``.
        root : PathLike, optional
            The directory containing local working copies, by default
            the current working directory.
        progress_bar : bool, optional
            Whether to draw a progress bar, by default False.

        Raises
        ------
        ConfigError
            If `max_jobs` is out of range.
        """
        self.descriptors = list(descriptors)
        self.backend = backend
        self.root = root
        self.progress_bar = progress_bar
        self.controller: ConcurrencyController[None] = ConcurrencyController(
            max_jobs)
        self.state = BatchState.PLANNING
        self.tracker: Optional[ProgressTracker] = None

    def plan(self) -> List[Job]:
        """
        Build one job per descriptor.
        """
        self.state = BatchState.PLANNING
        return [plan(d, self.root) for d in self.descriptors]

    async def _execute(self, job: Job) -> None:
        assert self.tracker is not None
        if self.state is BatchState.DISPATCHING:
            self.state = BatchState.RUNNING
        job_logger = logger.getChild(job.name)
        succeeded = False
        try:
            if job.action is Action.FETCH:
                job_logger.info(f"[{job.name}] already exists, fetching...")
                await self.backend.fetch(job.path)
            else:
                job_logger.info(f"Cloning [{job.name}]...")
                await self.backend.clone(job.url, job.path)
            succeeded = True
        finally:
            self.tracker.report(job.name, succeeded)

    async def run(self) -> BatchReport:
        """
        Run every job to completion.

        Returns
        -------
        BatchReport
            The number of completed jobs and the failures among them.
        """
        jobs = self.plan()
        self.tracker = ProgressTracker(len(jobs), self.progress_bar)
        logger.info(
            f"Starting to process {len(jobs)} repos with max "
            f"{self.controller.max_jobs} concurrent jobs...")
        self.state = BatchState.DISPATCHING
        try:
            results = await self.controller.run(jobs, self._execute)
        finally:
            self.tracker.close()
        state = self.tracker.state
        assert state.is_drained, f"{state.completed} of {state.total} jobs completed"
        self.state = BatchState.DRAINED
        report = BatchReport(state.total, state.completed)
        for job, result in zip(jobs, results):
            if isinstance(result, Except):
                report.failures[job.name] = result
        logger.info(
            f"All {report.total} repos processed: {report.succeeded} succeeded, "
            f"{len(report.failures)} failed")
        return report


def dry_run(
        descriptors: Sequence[RepoDescriptor],
        stream: Optional[TextIO] = None) -> BatchReport:
    """
    List the repositories that a batch would synchronize.

    Parameters
    ----------
    descriptors : Sequence[RepoDescriptor]
        The filtered repositories.
    stream : Optional[TextIO], optional
        Where to print the listing, by default standard output.

    Returns
    -------
    BatchReport
        A report whose total is the number of repositories listed.
    """
    print(
        "Dry run mode enabled. "
        "The following repositories would be processed:",
        file=stream)
    for descriptor in descriptors:
        print(f" - {descriptor.name} ({descriptor.url})", file=stream)
    print(f"Total repositories to be processed: {len(descriptors)}", file=stream)
    return BatchReport(len(descriptors), dry_run=True)


async def synchronize(
        config: 'SyncConfig',
        source: Optional[RepoSource] = None,
        backend: Optional[ExecutionBackend] = None,
        stream: Optional[TextIO] = None) -> BatchReport:
    """
    Retrieve, filter, and synchronize the configured repositories.

    Parameters
    ----------
    config : SyncConfig
        The configuration, validated before the listing is retrieved.
    source : Optional[RepoSource], optional
        The listing source, by default the one made by `config`.
    backend : Optional[ExecutionBackend], optional
        The execution backend, by default the one made by `config`.
        Never used in a dry run.
    stream : Optional[TextIO], optional
        Where a dry run prints its listing.

    Returns
    -------
    BatchReport
        The outcome of the batch.

    Raises
    ------
    ConfigError
        If the configuration is invalid.
    SourceRetrievalError
        If the listing cannot be retrieved.
    ParseError
        If the listing is malformed.
    """
    config.validate()
    if source is None:
        source = config.make_source()
    logger.info("Fetching list of repos...")
    descriptors = await source.list_repositories()
    descriptors = filter_descriptors(descriptors, config.exclude)
    if config.dry_run:
        return dry_run(descriptors, stream)
    if backend is None:
        backend = config.make_backend()
    batch = Batch(
        descriptors,
        backend,
        config.max_jobs,
        expand(config.directory),
        config.progress_bar)
    return await batch.run()
