"""Setup configuration for esh-cli package.

This module configures the package for distribution, including dependencies,
entry points, and metadata. It reads requirements from requirements.txt if available,
otherwise uses a default set of requirements.

Example:
    To install the package:
        $ pip install .

    To install with test dependencies:
        $ pip install .[test]

Attributes:
    requirements_file (Path): Path to requirements.txt file
    requirements (list): List of package dependencies
"""

from pathlib import Path
from setuptools import setup, find_packages

requirements_file = Path("requirements.txt")
if requirements_file.exists():
    with open(requirements_file, encoding="utf-8") as f:
        requirements = f.read().splitlines()
else:
    # Default requirements if file is not found
    requirements = [
        "PyYAML>=6.0",
        "GitPython>=3.1.0",
        "dpath>=2.1.0",
    ]

setup(
    name="esh-cli",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "esh-cli=esh_cli.cli:main",
        ],
    },
    python_requires=">=3.10",
    description="Tool for managing deployment version tags in git repositories",
)
