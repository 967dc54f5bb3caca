# tests/test_task_api.py

from __future__ import annotations

from datetime import datetime

import pytest

from taskique.core.errors import ValidationSkipped
from taskique.tasks.task_api import build_draft, parse_due_date, parse_estimation
from taskique.tasks.task_models import Estimation, EstimationUnit, Priority

from .conftest import TODAY


@pytest.mark.parametrize("title", ["", "   ", None])
def test_blank_title_is_skipped(title) -> None:
    with pytest.raises(ValidationSkipped):
        build_draft(title, today=TODAY)


def test_build_draft_parses_fields() -> None:
    draft = build_draft(
        "  Write report ",
        description=" quarterly ",
        due="tomorrow",
        priority="HIGH",
        estimate="90m",
        tags=("1",),
        today=TODAY,
    )

    assert draft.title == "Write report"
    assert draft.description == "quarterly"
    assert draft.due_date == datetime(2026, 10, 20, 0, 0)
    assert draft.priority == Priority.HIGH
    assert draft.estimation == Estimation(EstimationUnit.MINUTES, 90.0)
    assert draft.tags == ("1",)


def test_build_draft_defaults() -> None:
    draft = build_draft("Task", today=TODAY)
    assert draft.priority == Priority.MEDIUM
    assert draft.due_date is None
    assert draft.estimation.value is None


def test_build_draft_rejects_unknown_priority() -> None:
    with pytest.raises(ValueError):
        build_draft("Task", priority="urgent", today=TODAY)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("today", datetime(2026, 10, 19)),
        ("Tomorrow", datetime(2026, 10, 20)),
        ("+3", datetime(2026, 10, 22)),
        ("2026-11-01", datetime(2026, 11, 1)),
        ("2026-11-01T17:30", datetime(2026, 11, 1, 17, 30)),
        ("", None),
        ("none", None),
        ("-", None),
        (None, None),
    ],
)
def test_parse_due_date(text, expected) -> None:
    assert parse_due_date(text, today=TODAY) == expected


def test_parse_due_date_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_due_date("next blue moon", today=TODAY)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("90m", Estimation(EstimationUnit.MINUTES, 90.0)),
        ("2h", Estimation(EstimationUnit.HOURS, 2.0)),
        ("1.5 days", Estimation(EstimationUnit.DAYS, 1.5)),
        ("", Estimation()),
    ],
)
def test_parse_estimation(text, expected) -> None:
    assert parse_estimation(text) == expected


def test_parse_estimation_rejects_unknown_unit() -> None:
    with pytest.raises(ValueError):
        parse_estimation("3 weeks")
