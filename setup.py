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
fetch-repos: Clone or update every repository of a GitHub owner.
"""

from setuptools import find_packages, setup

setup(
    name="fetch-repos",
    version="0.1.0",
    description="Clone or update every repository of a GitHub owner.",
    license="LGPL-3.0-or-later",
    python_requires=">=3.10",
    packages=find_packages(include=["fetchrepos", "fetchrepos.*"]),
    install_requires=[
        "GitPython>=3.1",
        "PyYAML>=5.4",
        "tqdm>=4.60",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["fetch-repos=fetchrepos.main:main"],
    },
)
