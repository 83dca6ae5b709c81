"""Parser for ``git branch -a`` output."""

from typing import List

CURRENT_BRANCH_MARKER = "*"
REMOTES_PREFIX = "remotes/"
HEAD_ALIAS = "HEAD ->"


def parse_branches(output: str) -> List[str]:
    """Return branch names in output order.

    The current-branch marker is stripped, ``remotes/`` is removed so remote
    branches read as ``origin/main``, and ``HEAD -> ...`` aliases and
    detached-HEAD entries are dropped.
    """
    branches: List[str] = []
    for raw in output.splitlines():
        line = raw.strip()
        if not line or HEAD_ALIAS in line:
            continue
        if line.startswith(CURRENT_BRANCH_MARKER):
            line = line[len(CURRENT_BRANCH_MARKER):].strip()
        if not line or line.startswith("("):
            continue
        if line.startswith(REMOTES_PREFIX):
            line = line[len(REMOTES_PREFIX):]
        branches.append(line)
    return branches
