from __future__ import annotations

from dataclasses import dataclass

from relver.core.project import Project
from relver.git.repository import GitRepository
from relver.output.console import ConsoleProtocol
from relver.versioning.policy import PolicyTable


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    """Everything a versioning service touches, passed explicitly.

    The repository and console are protocols so tests can run the services
    against an in-memory repository and a capturing console.
    """

    project: Project
    repo: GitRepository
    console: ConsoleProtocol
    policies: PolicyTable

    @classmethod
    def create(
        cls, *, project: Project, repo: GitRepository, console: ConsoleProtocol
    ) -> ReleaseContext:
        return cls(
            project=project,
            repo=repo,
            console=console,
            policies=PolicyTable.from_config(project.config),
        )
