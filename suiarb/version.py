"""Build version string derived from the git checkout."""

from __future__ import annotations

import subprocess


class VersionError(RuntimeError):
    """Raised when git output cannot be turned into a version string."""


def _git(*args: str) -> str:
    result = subprocess.run(["git", *args], capture_output=True, check=False)
    return result.stdout.decode("utf-8")


def get_git_commit() -> str:
    """Return "<branch>-<commit>[-dirty]@<date>" for the current checkout."""
    output = _git("log", "-1", "--pretty=format:%h,%ad", "--date=format:%Y-%m-%d").strip()
    parts = output.split(",")
    if len(parts) != 2:
        raise VersionError("Unexpected output format")
    commit, date = parts

    dirty = "-dirty" if _git("status", "-s") else ""
    branch = _git("rev-parse", "--abbrev-ref", "HEAD").strip()

    return f"{branch}-{commit}{dirty}@{date}"


def build_version() -> str:
    """The version string for this build."""
    return get_git_commit()