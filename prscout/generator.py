"""Template parameters for discovered pull requests.

Each open pull request becomes one flat mapping of strings, ready to be
substituted into a per-PR template (e.g. a preview environment).
"""

import logging
import re
from typing import Dict, List

from prscout.adapters.base import PullRequestService, RepositoryNotFoundError
from prscout.models import PullRequest

logger = logging.getLogger(__name__)

SLUG_MAX_LENGTH = 50


def slugify(value: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Lowercase, non-alphanumeric runs to '-', truncated to max_length."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")
    return slug


def pull_request_params(pr: PullRequest) -> Dict[str, str]:
    return {
        "number": str(pr.number),
        "title": pr.title,
        "branch": pr.branch,
        "branch_slug": slugify(pr.branch),
        "target_branch": pr.target_branch,
        "target_branch_slug": slugify(pr.target_branch),
        "head_sha": pr.head_sha,
        "head_short_sha": pr.head_sha[:8],
        "head_short_sha_7": pr.head_sha[:7],
        "author": pr.author,
    }


def generate_params(
    service: PullRequestService,
    timeout: float | None = None,
    continue_on_not_found: bool = True,
) -> List[Dict[str, str]]:
    """List pull requests and turn each into template parameters.

    A missing repository yields no parameters when continue_on_not_found
    is set; every other error propagates.
    """
    try:
        pulls = service.list_pull_requests(timeout=timeout)
    except RepositoryNotFoundError as e:
        if not continue_on_not_found:
            raise
        logger.warning("Skipping %s/%s: %s", e.owner, e.repository, e)
        pulls = e.pull_requests
    return [pull_request_params(pr) for pr in pulls]
