"""Build the configured pull request service."""

import logging

from prscout.adapters import BitbucketCloudService, ConfigurationError, PullRequestService
from prscout.config import AppConfig

logger = logging.getLogger(__name__)


def build_bitbucket_cloud(config: AppConfig) -> BitbucketCloudService:
    """Pick the auth mode from whichever credentials resolve."""
    bb = config.bitbucket_cloud
    options = {"timeout": bb.timeout, "follow_next": bb.follow_next}
    password = config.bitbucket_password_resolved
    if bb.username and password:
        return BitbucketCloudService.with_basic_auth(
            bb.api_url, bb.username, password, bb.owner, bb.repository, **options
        )
    if bb.username:
        logger.warning(
            "Bitbucket username %s is set but no password resolved; falling back to token or anonymous access",
            bb.username,
        )
    token = config.bitbucket_token_resolved
    if token:
        return BitbucketCloudService.with_bearer_token(bb.api_url, token, bb.owner, bb.repository, **options)
    return BitbucketCloudService.without_auth(bb.api_url, bb.owner, bb.repository, **options)


def build_service(config: AppConfig) -> PullRequestService:
    """Return the PullRequestService for config.provider."""
    if config.provider == "bitbucket_cloud":
        return build_bitbucket_cloud(config)
    raise ConfigurationError(f"unsupported provider: {config.provider}")
