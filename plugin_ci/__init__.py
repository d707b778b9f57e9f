"""
plugin-ci: build, package, test and report pipeline for plugin artifacts.

Stages write into isolated job folders under ``ci/jobs``; later stages
merge those outputs into a canonical dist tree, a distributable archive,
a build report and a branch/PR aware history store.
"""

__all__ = ["__version__"]

try:
    from importlib.metadata import version

    __version__ = version("plugin-ci")
except Exception:
    __version__ = "0.1.0"
