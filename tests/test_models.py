"""Tests for the PullRequest record."""

import pytest
from pydantic import ValidationError

from prscout.models import PullRequest


def _record(**overrides: object) -> PullRequest:
    fields = {
        "number": 42,
        "title": "Fix bug",
        "branch": "feature/x",
        "target_branch": "main",
        "head_sha": "abc123",
        "author": "jdoe",
    }
    fields.update(overrides)
    return PullRequest(**fields)


def test_equal_by_value() -> None:
    assert _record() == _record()
    assert _record() != _record(head_sha="def456")


def test_immutable() -> None:
    pr = _record()
    with pytest.raises(ValidationError):
        pr.title = "Changed"


def test_hashable() -> None:
    assert len({_record(), _record(), _record(number=43)}) == 2


def test_dump_uses_field_names() -> None:
    assert _record().model_dump() == {
        "number": 42,
        "title": "Fix bug",
        "branch": "feature/x",
        "target_branch": "main",
        "head_sha": "abc123",
        "author": "jdoe",
    }
