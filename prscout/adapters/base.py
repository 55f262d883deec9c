"""Abstract base for pull request services and their error taxonomy."""

from abc import ABC, abstractmethod
from typing import List

from prscout.models import PullRequest


class PullRequestServiceError(Exception):
    """Raised when listing pull requests fails."""

    pass


class RepositoryNotFoundError(PullRequestServiceError):
    """Repository does not exist or is not visible with the given credentials.

    ``pull_requests`` is always an empty list so callers that decide to
    continue can treat the repository as having no pull requests.
    """

    def __init__(self, owner: str, repository: str, message: str | None = None) -> None:
        self.owner = owner
        self.repository = repository
        self.pull_requests: List[PullRequest] = []
        super().__init__(message or f"repository {owner}/{repository} not found")


class DecodeError(PullRequestServiceError):
    """Provider response did not have the expected shape."""

    pass


class TransportError(PullRequestServiceError):
    """Network, auth or HTTP failure talking to the provider."""

    pass


class ConfigurationError(PullRequestServiceError):
    """Invalid service construction parameters (e.g. malformed base URL)."""

    pass


class PullRequestService(ABC):
    """Interface every SCM provider adapter implements (Bitbucket, GitHub, GitLab...).

    Repository coordinates and credentials are bound at construction time.
    """

    @abstractmethod
    def list_pull_requests(self, timeout: float | None = None) -> List[PullRequest]:
        """List open pull requests of the configured repository.

        ``timeout`` is a total budget in seconds for the whole query.
        Raises a PullRequestServiceError subclass on failure.
        """
        ...
