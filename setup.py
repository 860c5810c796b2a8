#!/usr/bin/env python3
# =============================================================================
#  whileai — setup.py
#
#  The version lives in whileai/__init__.py and runtime requirements in
#  requirements.txt, so both have a single source of truth.
#
#      pip install -e ".[test]"
#      python -m pytest
# =============================================================================

from __future__ import annotations

import re
from pathlib import Path

from setuptools import setup, find_packages

_HERE = Path(__file__).resolve().parent


def _read_version() -> str:
    """Extract ``__version__`` from whileai/__init__.py."""
    init = _HERE / "whileai" / "__init__.py"
    text = init.read_text(encoding="utf-8")
    match = re.search(r'^__version__(?::\s*str)?\s*=\s*"([^"]+)"', text, re.MULTILINE)
    if match:
        return match.group(1)
    return "0.0.0"


def _read_long_description() -> str:
    """Read README.md for the long description."""
    readme = _HERE / "README.md"
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


def _read_requirements() -> list[str]:
    """Read requirements.txt if it exists."""
    req_file = _HERE / "requirements.txt"
    if req_file.exists():
        lines = req_file.read_text(encoding="utf-8").splitlines()
        return [
            ln.strip()
            for ln in lines
            if ln.strip() and not ln.strip().startswith("#")
        ]
    return []


_TEST_REQUIRES = [
    "pytest>=7.0",
    "pytest-cov>=4.0",
    "hypothesis>=6.0",
]

setup(
    name="whileai",
    version=_read_version(),
    description=(
        "Abstract interpreter for a small while language: interval and "
        "constant domains, widening and narrowing."
    ),
    long_description=_read_long_description(),
    long_description_content_type="text/markdown",
    license="MIT",
    author="whileai contributors",
    python_requires=">=3.10",
    packages=find_packages(
        include=["whileai", "whileai.*"],
        exclude=["tests", "tests.*"],
    ),
    package_data={"whileai": ["py.typed"]},
    install_requires=_read_requirements(),
    extras_require={
        "test": _TEST_REQUIRES,
        "dev": _TEST_REQUIRES + [
            "ruff>=0.4",
            "mypy>=1.10",
        ],
    },
    entry_points={
        "console_scripts": [
            "whileai=whileai.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Software Development :: Quality Assurance",
        "Typing :: Typed",
    ],
    keywords=[
        "static-analysis",
        "abstract-interpretation",
        "widening",
        "interval-domain",
        "program-analysis",
    ],
    zip_safe=False,
)
