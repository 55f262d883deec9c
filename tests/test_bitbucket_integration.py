"""Integration test for Bitbucket Cloud service using the real API.

Requires BITBUCKET_OWNER and BITBUCKET_REPOSITORY (a public repository, or
set BITBUCKET_TOKEN). Run: pytest tests/test_bitbucket_integration.py -v
"""

import os

import pytest

from prscout.adapters import BitbucketCloudService, RepositoryNotFoundError
from prscout.models import PullRequest

OWNER = os.environ.get("BITBUCKET_OWNER", "")
REPOSITORY = os.environ.get("BITBUCKET_REPOSITORY", "")
TOKEN = os.environ.get("BITBUCKET_TOKEN", "")


def _service(repository: str) -> BitbucketCloudService:
    if TOKEN:
        return BitbucketCloudService.with_bearer_token("", TOKEN, OWNER, repository)
    return BitbucketCloudService.without_auth("", OWNER, repository)


@pytest.mark.skipif(not (OWNER and REPOSITORY), reason="BITBUCKET_OWNER / BITBUCKET_REPOSITORY not set")
def test_list_open_pull_requests() -> None:
    pulls = _service(REPOSITORY).list_pull_requests(timeout=60)

    assert isinstance(pulls, list)
    for pr in pulls:
        assert isinstance(pr, PullRequest)
        assert pr.number > 0
        assert pr.branch


@pytest.mark.skipif(not OWNER, reason="BITBUCKET_OWNER not set")
def test_missing_repository_is_classified() -> None:
    with pytest.raises(RepositoryNotFoundError) as exc_info:
        _service("prscout-repository-that-does-not-exist").list_pull_requests(timeout=60)
    assert exc_info.value.pull_requests == []
