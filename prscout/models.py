"""Provider-agnostic pull request record (Pydantic)."""

from pydantic import BaseModel, ConfigDict


class PullRequest(BaseModel):
    """Open pull request as seen at fetch time.

    Identical shape for every provider. ``number`` is unique within a
    repository; the other fields are a snapshot.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    branch: str
    target_branch: str
    head_sha: str
    author: str
