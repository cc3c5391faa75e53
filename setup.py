#!/usr/bin/env python3
# Copyright (C) 2016-- Marcus Fedarko, Jay Ghurye, Todd Treangen, Mihai Pop
# Authored by Marcus Fedarko
#
# This file is part of AsmScope.
#
# AsmScope is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# AsmScope is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with AsmScope.  If not, see <http://www.gnu.org/licenses/>.

import os
from setuptools import find_packages, setup

classes = """
    Development Status :: 3 - Alpha
    License :: OSI Approved :: GNU GPL 3 License
    Topic :: Scientific/Engineering
    Topic :: Scientific/Engineering :: Bio-Informatics
    Topic :: Scientific/Engineering :: Visualization
    Programming Language :: Python :: 3 :: Only
    Operating System :: Unix
    Operating System :: POSIX
    Operating System :: MacOS :: MacOS X
"""
classifiers = [s.strip() for s in classes.split("\n") if s]

description = "Structural pattern detection for (meta)genome assembly graphs"

long_description = (
    "AsmScope identifies nested structural patterns (chains, cyclic chains, "
    "bubbles, and frayed ropes) in assembly graphs, lays the graph out "
    "hierarchically, and provides a collapsible model of the result for "
    "interactive viewers."
)

# We can't just import __version__ from asmscope, because our modules import
# packages that probably haven't been installed yet at this point in setup.
__version__ = None
here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, "asmscope", "__init__.py"), "r") as fp:
    for line in fp.readlines():
        if line.startswith('__version__ = "'):
            __version__ = line.split('"')[1]
if __version__ is None:
    raise RuntimeError("Couldn't find version string?")

setup(
    name="asmscope",
    version=__version__,
    license="GPL3",
    description=description,
    long_description=long_description,
    author="AsmScope Development Team",
    classifiers=classifiers,
    packages=find_packages(include=["asmscope", "asmscope.*"]),
    install_requires=[
        "click",
        "numpy",
        "networkx",
        "pygraphviz",
    ],
    # The reason I pin the black version to at least 22.1.0 is that this
    # version changes how the ** operator is formatted (no surrounding spaces,
    # usually). Not being consistent causes the build to fail, hence the pin.
    extras_require={
        "dev": ["pytest", "pytest-cov", "flake8", "black>=22.1.0"]
    },
    entry_points={"console_scripts": ["asmscope=asmscope._cli:run_script"]},
    python_requires=">=3.8",
)
