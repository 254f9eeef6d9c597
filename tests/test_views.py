from datetime import date, datetime

import pytest

from taskpaper.index import build_index
from taskpaper.views import ViewMode, build_views, filter_view, parse_tag_date

SAMPLE_DOCUMENT = [
    "# Work",
    "- [ ] Task 1 @due(2024-01-01)",
    "- [x] Task 2",
    "## Sub",
    "- [ ] Task 3 @today",
]


def _texts(result):
    return [task.text for task in result.tasks]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-01-05", date(2024, 1, 5)),
        ("2024/1/5", date(2024, 1, 5)),
        (" 2024-12-31 ", date(2024, 12, 31)),
        ("2024-13-01", None),
        ("2024-02-30", None),
        ("2024/01-05", None),
        ("24-01-05", None),
        ("\u0662\u0660\u0662\u0664-01-01", None),
        ("tomorrow", None),
        (None, None),
    ],
)
def test_parse_tag_date(value, expected):
    assert parse_tag_date(value) == expected


def test_views_for_sample_document():
    index = build_index(SAMPLE_DOCUMENT)
    views = build_views(index, datetime(2024, 1, 1, 9, 30))

    assert views[ViewMode.ALL].count == 3
    assert views[ViewMode.ALL].forest == index.forest
    assert _texts(views[ViewMode.COMPLETED]) == ["Task 2"]
    assert _texts(views[ViewMode.TODAY]) == ["Task 1 @due(2024-01-01)", "Task 3 @today"]
    assert views[ViewMode.TODAY].count == 2


def test_overdue_open_task_is_in_today():
    index = build_index(["- [ ] X @due(2024-01-01)"])

    result = filter_view(index, ViewMode.TODAY, datetime(2024, 1, 2))

    assert _texts(result) == ["X @due(2024-01-01)"]


def test_completed_task_outside_window_is_not_in_today():
    index = build_index(["- [x] Y @due(2024-01-01)"])

    result = filter_view(index, ViewMode.TODAY, datetime(2024, 1, 2))

    assert result.tasks == ()
    assert result.count == 0


def test_completed_task_dated_today_is_in_today():
    index = build_index(["- [x] Y @on(2024/1/2)"])

    result = filter_view(index, ViewMode.TODAY, datetime(2024, 1, 2, 23, 59))

    assert result.count == 1


def test_week_window_includes_seventh_following_day():
    index = build_index(
        [
            "- [ ] in window @due(2024-01-08)",
            "- [ ] past window @due(2024-01-09)",
            "- [x] done in window @due(2024-01-05)",
            "- [x] done before window @due(2023-12-31)",
        ]
    )

    result = filter_view(index, ViewMode.WEEK, datetime(2024, 1, 1))

    assert _texts(result) == ["in window @due(2024-01-08)", "done in window @due(2024-01-05)"]


def test_future_date_is_in_week_but_not_today():
    index = build_index(["- [ ] later @due(2024-01-03)"])
    now = datetime(2024, 1, 1)

    assert filter_view(index, ViewMode.TODAY, now).count == 0
    assert filter_view(index, ViewMode.WEEK, now).count == 1


def test_cancelled_tasks_never_scheduled():
    index = build_index(["- [-] dropped @today @due(2024-01-01)"])
    now = datetime(2024, 1, 1)

    assert filter_view(index, ViewMode.TODAY, now).count == 0
    assert filter_view(index, ViewMode.WEEK, now).count == 0


def test_unparseable_date_only_disables_that_tag():
    index = build_index(
        [
            "- [ ] broken @due(someday)",
            "- [ ] rescued @due(someday) @on(2024-01-01)",
            "- [ ] other tags @p1 @due(2024-99-99)",
        ]
    )

    result = filter_view(index, ViewMode.TODAY, datetime(2024, 1, 1))

    assert _texts(result) == ["rescued @due(someday) @on(2024-01-01)"]


def test_view_result_serializes_forest_only_for_all():
    index = build_index(SAMPLE_DOCUMENT)
    views = build_views(index, datetime(2024, 1, 1))

    assert "forest" in views[ViewMode.ALL].to_dict()
    completed = views[ViewMode.COMPLETED].to_dict()
    assert "forest" not in completed
    assert completed["count"] == 1
    assert completed["mode"] == "completed"
