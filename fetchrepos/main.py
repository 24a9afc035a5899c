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
Clone or update every repository of a GitHub owner.
"""
import argparse
import asyncio
import logging
from typing import List, Optional

from fetchrepos.config import SyncConfig
from fetchrepos.repo.descriptor import Transport
from fetchrepos.repo.download import BACKENDS
from fetchrepos.repo.exception import FatalSyncError
from fetchrepos.repo.filter import split_patterns
from fetchrepos.sync.batch import synchronize
from fetchrepos.sync.controller import MAX_CONCURRENCY
from fetchrepos.util.logging import configure_logging

logger: logging.Logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """
    Create the command line parser.

    Every option defaults to None so that only options given on the
    command line override the configuration file.
    """
    parser = argparse.ArgumentParser(
        prog="fetch-repos",
        description=__doc__)
    parser.add_argument(
        "-o",
        "--owner",
        help="The GitHub organization or user whose repositories are "
        "synchronized. Defaults to the authenticated user.")
    parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        default=None,
        help="Perform a dry run without making any changes.")
    parser.add_argument(
        "-f",
        "--filters",
        "--exclude",
        dest="exclude",
        type=split_patterns,
        help="Comma-separated list of repository name filters to exclude.")
    parser.add_argument(
        "-m",
        "--max-jobs",
        type=int,
        help=f"Maximum number of concurrent jobs (less than {MAX_CONCURRENCY}).")
    transport = parser.add_mutually_exclusive_group()
    transport.add_argument(
        "--https",
        dest="transport",
        action="store_const",
        const=Transport.HTTPS,
        help="Use HTTPS rather than SSH to reach repositories.")
    transport.add_argument(
        "--ssh",
        dest="transport",
        action="store_const",
        const=Transport.SSH,
        help="Use SSH to reach repositories (the default).")
    parser.add_argument(
        "-C",
        "--directory",
        help="The directory containing the local working copies. "
        "Defaults to the current working directory.")
    parser.add_argument(
        "-L",
        "--limit",
        type=int,
        help="The maximum number of repositories to list.")
    parser.add_argument(
        "--source-file",
        help="Read the repository listing from a JSON file produced by "
        "'gh repo list --json sshUrl,url' instead of invoking 'gh'.")
    parser.add_argument(
        "--backend",
        choices=sorted(BACKENDS),
        help="How clones and fetches are performed.")
    parser.add_argument(
        "--progress-bar",
        action="store_true",
        default=None,
        help="Draw a progress bar.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Log debugging output.")
    parser.add_argument(
        "--config",
        help="A YAML file of default option values keyed by option name.")
    return parser


def load_config(args: argparse.Namespace) -> SyncConfig:
    """
    Merge command line options over the configuration file, if any.
    """
    overrides = vars(args).copy()
    path = overrides.pop("config")
    config = SyncConfig() if path is None else SyncConfig.from_yaml(path)
    return config.updated(overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line interface.

    Returns
    -------
    int
        Zero if the batch ran, even if some of its jobs failed, or one
        if the configuration or repository listing was unusable.
    """
    args = build_parser().parse_args(argv)
    configure_logging(bool(args.verbose))
    try:
        config = load_config(args)
        configure_logging(config.verbose)
        report = asyncio.run(synchronize(config))
    except FatalSyncError as e:
        logger.error(f"Aborting: {e}")
        return 1
    if report.failures:
        logger.warning(
            f"{len(report.failures)} repositories failed: "
            f"{', '.join(sorted(report.failures))}")
    return 0
