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
Utilities for logging.
"""
import logging
import sys
from typing import NoReturn, Optional, TextIO, Type

from fetchrepos.util.debug import Debug

LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
ROOT_LOGGER_NAME = "fetchrepos"


def default_log_level() -> int:
    """
    Get the default log level based on debugging status.
    """
    return logging.DEBUG if Debug.is_debug else logging.INFO


def configure_logging(
        verbose: bool = False,
        stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach a stream handler to the package's root logger.

    Repeated calls replace the previously installed handler rather than
    stacking duplicates.

    Parameters
    ----------
    verbose : bool, optional
        If True, enable debugging output, by default False.
    stream : Optional[TextIO], optional
        The stream to which records are written, by default standard
        error.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    Debug.is_debug = verbose
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_fetchrepos_handler", False):
            logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._fetchrepos_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    level = default_log_level()
    logger.setLevel(level)
    # module loggers fix their level when first imported
    for name, child in logging.root.manager.loggerDict.items():
        if (name.startswith(f"{ROOT_LOGGER_NAME}.")
                and isinstance(child,
                               logging.Logger)):
            child.setLevel(level)
    return logger


def log_and_raise(
        logger: logging.Logger,
        msg: str,
        error: Type[Exception]) -> NoReturn:
    """
    Log an error message and then raise it as part of an exception.

    Parameters
    ----------
    logger : logging.Logger
        The logger.
    msg : str
        The error message.
    error : Type[Exception]
        The type of error.

    Raises
    ------
    Exception
        The given exception class.
    """
    logger.error(msg)
    raise error(msg)
