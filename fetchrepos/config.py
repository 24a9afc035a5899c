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
Configuration of a synchronization batch.
"""
import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from fetchrepos.repo.descriptor import Transport
from fetchrepos.repo.download import BACKENDS, ExecutionBackend, make_backend
from fetchrepos.repo.exception import ConfigError
from fetchrepos.repo.filter import split_patterns
from fetchrepos.repo.source import (
    DEFAULT_LIMIT,
    GitHubCLISource,
    JSONFileSource,
    RepoSource,
)
from fetchrepos.sync.controller import DEFAULT_CONCURRENCY, validate_concurrency
from fetchrepos.util.logging import default_log_level, log_and_raise
from fetchrepos.util.path import expand

logger: logging.Logger = logging.getLogger(__name__)
logger.setLevel(default_log_level())


@dataclass
class SyncConfig:
    """
    Settings for one invocation.
    """

    owner: Optional[str] = None
    """
    The organization or user whose repositories are listed.

    If None, then the authenticated user's repositories are listed.
    """
    dry_run: bool = False
    """
    If True, list the selected repositories without touching them.
    """
    exclude: Optional[List[str]] = None
    """
    Case-insensitive substrings of repository names to skip.
    """
    max_jobs: int = DEFAULT_CONCURRENCY
    """
    The number of clones or fetches allowed to run at once.
    """
    transport: Transport = Transport.SSH
    """
    The URL scheme used for every repository in the batch.
    """
    directory: str = os.curdir
    """
    The directory containing the local working copies.
    """
    limit: int = DEFAULT_LIMIT
    """
    The maximum number of repositories to list.
    """
    source_file: Optional[str] = None
    """
    A saved listing to read instead of invoking ``gh``.
    """
    backend: str = "subprocess"
    """
    The name of the execution backend; a key of `BACKENDS`.
    """
    progress_bar: bool = False
    """
    If True, draw a progress bar while jobs complete.
    """
    verbose: bool = False
    """
    If True, log debugging output.
    """

    def __post_init__(self) -> None:
        """
        Normalize loosely typed values such as those read from YAML.
        """
        if isinstance(self.transport, str):
            try:
                self.transport = Transport(self.transport.lower())
            except ValueError:
                log_and_raise(
                    logger,
                    f"Unknown transport '{self.transport}'; expected one of "
                    f"{', '.join(t.value for t in Transport)}",
                    ConfigError)
        if isinstance(self.exclude, str):
            self.exclude = split_patterns(self.exclude)

    def validate(self) -> 'SyncConfig':
        """
        Check the configuration before any work starts.

        Returns
        -------
        SyncConfig
            This configuration.

        Raises
        ------
        ConfigError
            If the concurrency cap is out of range, the listing limit is
            not positive, the backend is unknown, or a field has the
            wrong type.
        """
        self._check_types()
        validate_concurrency(self.max_jobs)
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) \
                or self.limit < 1:
            log_and_raise(
                logger,
                f"Listing limit must be a positive integer, got {self.limit!r}",
                ConfigError)
        if not isinstance(self.backend, str) or self.backend not in BACKENDS:
            log_and_raise(
                logger,
                f"Unknown backend '{self.backend}'; expected one of "
                f"{', '.join(BACKENDS)}",
                ConfigError)
        return self

    def _check_types(self) -> None:
        for name in ("owner", "source_file"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                log_and_raise(
                    logger,
                    f"'{name}' must be a string, got {value!r}",
                    ConfigError)
        if not isinstance(self.directory, str):
            log_and_raise(
                logger,
                f"'directory' must be a string, got {self.directory!r}",
                ConfigError)
        if self.exclude is not None and (
                not isinstance(self.exclude, list)
                or not all(isinstance(p, str) for p in self.exclude)):
            log_and_raise(
                logger,
                f"'exclude' must be a list of strings, got {self.exclude!r}",
                ConfigError)
        if not isinstance(self.transport, Transport):
            log_and_raise(
                logger,
                f"'transport' must be one of "
                f"{', '.join(t.value for t in Transport)}, "
                f"got {self.transport!r}",
                ConfigError)
        for name in ("dry_run", "progress_bar", "verbose"):
            if not isinstance(getattr(self, name), bool):
                log_and_raise(
                    logger,
                    f"'{name}' must be true or false, "
                    f"got {getattr(self, name)!r}",
                    ConfigError)

    def make_source(self) -> RepoSource:
        """
        Create the source of the repository listing.
        """
        if self.source_file is not None:
            return JSONFileSource(expand(self.source_file), self.transport)
        return GitHubCLISource(self.owner, self.limit, self.transport)

    def make_backend(self) -> ExecutionBackend:
        """
        Create the configured execution backend.
        """
        return make_backend(self.backend)

    def updated(self, overrides: Dict[str, Any]) -> 'SyncConfig':
        """
        Get a copy of this configuration with some fields replaced.

        Entries of `overrides` whose value is None are ignored.
        """
        return dataclasses.replace(
            self,
            **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SyncConfig':
        """
        Create a configuration from a mapping of field names to values.

        Raises
        ------
        ConfigError
            If `data` contains a key that is not a field name.
        """
        names = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - names)
        if unknown:
            log_and_raise(
                logger,
                f"Unknown configuration keys: {', '.join(unknown)}",
                ConfigError)
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str) -> 'SyncConfig':
        """
        Load a configuration from a YAML file.

        The file must contain a mapping whose keys are field names of
        `SyncConfig`.
        Dashes in keys are treated as underscores.

        Raises
        ------
        ConfigError
            If the file cannot be read or parsed or does not contain a
            mapping of known keys.
        """
        try:
            with open(expand(path), "r") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            log_and_raise(
                logger,
                f"Failed to load configuration {path}: {e}",
                ConfigError)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            log_and_raise(
                logger,
                f"Configuration {path} must contain a mapping",
                ConfigError)
        return cls.from_dict({str(k).replace("-", "_"): v for k, v in data.items()})
