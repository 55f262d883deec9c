"""Pull request services (contract, errors and provider implementations)."""

from prscout.adapters.base import (
    ConfigurationError,
    DecodeError,
    PullRequestService,
    PullRequestServiceError,
    RepositoryNotFoundError,
    TransportError,
)
from prscout.adapters.bitbucket_cloud import BitbucketCloudService, is_repository_not_found

__all__ = [
    "BitbucketCloudService",
    "ConfigurationError",
    "DecodeError",
    "PullRequestService",
    "PullRequestServiceError",
    "RepositoryNotFoundError",
    "TransportError",
    "is_repository_not_found",
]
