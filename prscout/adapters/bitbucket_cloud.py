"""Bitbucket Cloud pull request service."""

import logging
import time
from http import HTTPStatus
from typing import Any, List, Tuple
from urllib.parse import quote, urlsplit

import requests
from pydantic import BaseModel, Field, StrictInt, TypeAdapter, ValidationError, model_validator
from requests.auth import AuthBase, HTTPBasicAuth

from prscout.adapters.base import (
    ConfigurationError,
    DecodeError,
    PullRequestService,
    RepositoryNotFoundError,
    TransportError,
)
from prscout.models import PullRequest

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.bitbucket.org/2.0"
DEFAULT_TIMEOUT = 30.0
NOT_FOUND_MARKER = "404 Not Found"


class BitbucketApiError(Exception):
    """HTTP error from the Bitbucket API; text starts with the status line."""

    pass


def is_repository_not_found(error: BaseException) -> bool:
    """Return True when the error text says the repository (endpoint) is missing.

    Only the error string reaches the classifier, so this matches the status
    line rather than a status code.
    """
    return NOT_FOUND_MARKER in str(error)


class _BitbucketModel(BaseModel):
    """Bitbucket sends null for absent objects; treat null as missing."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class BitbucketCloudBranch(_BitbucketModel):
    name: str = ""


class BitbucketCloudCommit(_BitbucketModel):
    hash: str = ""


class BitbucketCloudAuthor(_BitbucketModel):
    # display_name and uuid are also sent but unused
    nickname: str = ""


class BitbucketCloudSource(_BitbucketModel):
    branch: BitbucketCloudBranch = Field(default_factory=BitbucketCloudBranch)
    commit: BitbucketCloudCommit = Field(default_factory=BitbucketCloudCommit)


class BitbucketCloudDestination(_BitbucketModel):
    branch: BitbucketCloudBranch = Field(default_factory=BitbucketCloudBranch)


class BitbucketCloudPullRequest(_BitbucketModel):
    """Pull request item as returned in the ``values`` array."""

    id: StrictInt
    title: str = ""
    source: BitbucketCloudSource = Field(default_factory=BitbucketCloudSource)
    destination: BitbucketCloudDestination = Field(default_factory=BitbucketCloudDestination)
    author: BitbucketCloudAuthor = Field(default_factory=BitbucketCloudAuthor)

    def to_pull_request(self) -> PullRequest:
        return PullRequest(
            number=self.id,
            title=self.title,
            branch=self.source.branch.name,
            target_branch=self.destination.branch.name,
            head_sha=self.source.commit.hash,
            author=self.author.nickname,
        )


_PULL_REQUEST_LIST = TypeAdapter(List[BitbucketCloudPullRequest])


def parse_base_url(base_url: str) -> str:
    """Validate the API base URL. Empty means the public Bitbucket Cloud API.

    Raises ValueError for anything that is not an absolute http(s) URL.
    """
    if not base_url:
        return DEFAULT_API_URL
    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError("expected an absolute http(s) URL")
    return base_url.rstrip("/")


def decode_page(payload: Any) -> Tuple[List[BitbucketCloudPullRequest], str | None]:
    """Narrow one paginated response and decode its ``values``.

    Returns the decoded items and the ``next`` page link (None on the last
    page). Raises DecodeError when the payload does not match.
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"unknown type returned from bitbucket pull requests: {type(payload).__name__}")
    values = payload.get("values")
    if not isinstance(values, list):
        raise DecodeError(f"unknown type returned from response values: {type(values).__name__}")
    try:
        pulls = _PULL_REQUEST_LIST.validate_python(values)
    except ValidationError as e:
        raise DecodeError(f"error decoding pull requests: {e}") from e
    next_url = payload.get("next")
    if next_url is not None and not isinstance(next_url, str):
        raise DecodeError(f"unknown type returned for next page link: {type(next_url).__name__}")
    return pulls, next_url or None


def _reason_phrase(resp: requests.Response) -> str:
    if resp.reason:
        return resp.reason
    try:
        return HTTPStatus(resp.status_code).phrase
    except ValueError:
        return ""


def _error_text(resp: requests.Response) -> str:
    status = f"{resp.status_code} {_reason_phrase(resp)}".strip()
    detail = (resp.text or "")[:200]
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        detail = body["error"].get("message") or detail
    return f"{status}: {detail}" if detail else status


class _BearerAuth(AuthBase):
    """Bearer token auth; an empty token strips any Authorization header."""

    def __init__(self, token: str) -> None:
        self._token = token

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        if self._token:
            r.headers["Authorization"] = f"Bearer {self._token}"
        else:
            r.headers.pop("Authorization", None)
        return r


class BitbucketCloudService(PullRequestService):
    """Bitbucket Cloud implementation of PullRequestService."""

    not_found_predicate = staticmethod(is_repository_not_found)

    def __init__(
        self,
        base_url: str,
        owner: str,
        repository_slug: str,
        *,
        username: str | None = None,
        password: str | None = None,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        follow_next: bool = True,
        session: requests.Session | None = None,
    ) -> None:
        if not owner or not repository_slug:
            raise ConfigurationError(f"owner and repository slug are required, got {owner!r}/{repository_slug!r}")
        try:
            api_url = parse_base_url(base_url)
        except ValueError as e:
            raise ConfigurationError(
                f"error parsing base url of {base_url} for {owner}/{repository_slug}: {e}"
            ) from e
        if username is not None and token is not None:
            raise ConfigurationError("basic credentials and bearer token are mutually exclusive")
        if timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {timeout}")

        self._api_url = api_url
        self._owner = owner
        self._repository_slug = repository_slug
        self._timeout = timeout
        self._follow_next = follow_next
        self._session = session or requests.Session()
        # Credentials go on each request; the session may be shared.
        self._auth: AuthBase
        if username is not None:
            self._auth_mode = "basic"
            self._auth = HTTPBasicAuth(username, password or "")
        else:
            self._auth_mode = "bearer" if token else "none"
            self._auth = _BearerAuth(token or "")

    @classmethod
    def with_basic_auth(
        cls,
        base_url: str,
        username: str,
        password: str,
        owner: str,
        repository_slug: str,
        **options: Any,
    ) -> "BitbucketCloudService":
        """Authenticate with username and app password."""
        return cls(base_url, owner, repository_slug, username=username, password=password, **options)

    @classmethod
    def with_bearer_token(
        cls,
        base_url: str,
        token: str,
        owner: str,
        repository_slug: str,
        **options: Any,
    ) -> "BitbucketCloudService":
        """Authenticate with an OAuth / access token."""
        return cls(base_url, owner, repository_slug, token=token, **options)

    @classmethod
    def without_auth(cls, base_url: str, owner: str, repository_slug: str, **options: Any) -> "BitbucketCloudService":
        """Anonymous access (public repositories only).

        Bitbucket has no explicit anonymous mode: this is a bearer adapter
        with an empty token, which sends no Authorization header.
        """
        return cls.with_bearer_token(base_url, "", owner, repository_slug, **options)

    @property
    def api_url(self) -> str:
        return self._api_url

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def repository_slug(self) -> str:
        return self._repository_slug

    @property
    def auth_mode(self) -> str:
        """One of basic, bearer, none."""
        return self._auth_mode

    def list_pull_requests(self, timeout: float | None = None) -> List[PullRequest]:
        deadline = time.monotonic() + timeout if timeout is not None else None
        url: str | None = self._pull_requests_url()
        params: dict[str, Any] | None = {"state": "OPEN"}
        visited: set[str] = set()
        pull_requests: List[PullRequest] = []

        while url:
            visited.add(url)
            payload = self._fetch(url, params, deadline)
            try:
                items, next_url = decode_page(payload)
            except DecodeError as e:
                raise DecodeError(
                    f"error listing pull requests for {self._owner}/{self._repository_slug}: {e}"
                ) from e
            pull_requests.extend(item.to_pull_request() for item in items)
            logger.debug("Fetched %d pull requests from %s", len(items), url)

            if not self._follow_next or not next_url:
                break
            if next_url in visited:
                raise DecodeError(
                    f"next page link {next_url} for {self._owner}/{self._repository_slug} was already visited"
                )
            url, params = next_url, None

        return pull_requests

    def _pull_requests_url(self) -> str:
        owner = quote(self._owner, safe="")
        slug = quote(self._repository_slug, safe="")
        return f"{self._api_url}/repositories/{owner}/{slug}/pullrequests"

    def _request_timeout(self, deadline: float | None) -> float:
        if deadline is None:
            return self._timeout
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TransportError(
                f"deadline exceeded listing pull requests for {self._owner}/{self._repository_slug}"
            )
        return min(remaining, self._timeout)

    def _fetch(self, url: str, params: dict[str, Any] | None, deadline: float | None) -> Any:
        """GET one page; classify provider failures."""
        timeout = self._request_timeout(deadline)
        logger.debug("GET %s", url)
        try:
            resp = self._session.request(
                "GET",
                url,
                params=params,
                headers={"Accept": "application/json"},
                auth=self._auth,
                timeout=timeout,
            )
            if resp.status_code >= 400:
                raise BitbucketApiError(_error_text(resp))
        except (BitbucketApiError, requests.RequestException) as e:
            if self.not_found_predicate(e):
                raise RepositoryNotFoundError(
                    self._owner,
                    self._repository_slug,
                    f"repository {self._owner}/{self._repository_slug} not found: {e}",
                ) from e
            raise TransportError(
                f"error listing pull requests for {self._owner}/{self._repository_slug}: {e}"
            ) from e
        try:
            return resp.json()
        except ValueError as e:
            raise DecodeError(
                f"response for {self._owner}/{self._repository_slug} is not JSON: {e}"
            ) from e
