"""
Git VCS provider.

Supplies commit, branch and remote for build metadata when the CI
environment does not provide them.
"""

import contextlib
import subprocess

from ...core.interfaces.vcs import IVCSProvider, VCSInfo


def _git(args: list[str], cwd: str | None = None) -> str:
    out = subprocess.check_output(["git", *args], cwd=cwd, stderr=subprocess.DEVNULL)
    return out.decode().strip()


class GitVCSProvider(IVCSProvider):
    """Git version control provider."""

    @property
    def name(self) -> str:
        return "git"

    def get_repo_root(self, path: str | None = None) -> str | None:
        """Get the git repository root directory."""
        try:
            return _git(["rev-parse", "--show-toplevel"], cwd=path)
        except (subprocess.CalledProcessError, FileNotFoundError):
            return None

    def get_info(self, repo_root: str) -> VCSInfo:
        """Get commit, branch and origin URL; missing pieces stay None."""
        info = VCSInfo()

        with contextlib.suppress(subprocess.CalledProcessError, FileNotFoundError):
            info.commit = _git(["rev-parse", "HEAD"], cwd=repo_root)

        with contextlib.suppress(subprocess.CalledProcessError, FileNotFoundError):
            branch = _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=repo_root)
            # Detached HEAD reports the literal "HEAD"
            info.branch = branch if branch != "HEAD" else None

        with contextlib.suppress(subprocess.CalledProcessError, FileNotFoundError):
            info.remote_url = _git(["remote", "get-url", "origin"], cwd=repo_root)

        return info
