"""Git operations used by the release workflow.

Usage:
    from relflow.git import Repository

    repo = Repository(Path("/path/to/app"))
    branch = repo.current_branch()
"""

from relflow.git.repository import GitError, Repository

__all__ = [
    "GitError",
    "Repository",
]
