# setup.py
"""Setup script for Workflow Composer."""

from setuptools import setup, find_packages

setup(
    name="workflow-composer",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "composer.catalog": ["*.yaml"],
    },
    install_requires=[
        "click>=8.0",
        "pyyaml>=6.0",
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "structlog>=23.1",
        "networkx>=3.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=23.0",
            "flake8>=6.0",
        ],
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "composer=cli.main:cli",
        ],
    },
    python_requires=">=3.8",
)
