"""Git operations module.

Usage:
    from relver.git import Repository

    repo = Repository(Path("/path/to/checkout"))
    branch = repo.current_branch()
"""

from relver.git.repository import (
    GitError,
    GitRepository,
    Repository,
)

__all__ = [
    "GitError",
    "GitRepository",
    "Repository",
]
