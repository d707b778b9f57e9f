"""Setup script for plugin-ci."""

from pathlib import Path

from setuptools import find_packages, setup

README = Path(__file__).parent / "README.md"

setup(
    name="plugin-ci",
    version="0.1.0",
    description="Build, package, test and report pipeline for plugin artifacts",
    long_description=README.read_text() if README.exists() else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["plugin_ci", "plugin_ci.*"]),
    python_requires=">=3.11",
    install_requires=[
        "blake3>=0.4",
        "click>=8.1",
        "dependency-injector>=4.41",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "sqlalchemy>=2.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "plugin-ci=plugin_ci.__main__:main",
        ],
    },
)
