from taskpaper.index import build_forest, build_index, classify_lines
from taskpaper.parser import EntryKind

SAMPLE_DOCUMENT = [
    "# Work",
    "- [ ] Task 1 @due(2024-01-01)",
    "- [x] Task 2",
    "## Sub",
    "- [ ] Task 3 @today",
]


def _shape(forest):
    return [
        (node.entry.kind.value, node.entry.text, _shape(node.children))
        for node in forest
    ]


def _walk(forest):
    for node in forest:
        yield node
        yield from _walk(node.children)


def test_classify_lines_drops_plain_lines():
    entries = classify_lines(["# Title", "", "prose", "- [ ] Task", "more prose"])

    assert [entry.kind for entry in entries] == [EntryKind.HEADER, EntryKind.TASK]
    assert [entry.line_number for entry in entries] == [0, 3]


def test_classify_lines_skips_setext_underline():
    entries = classify_lines(["Inbox", "=====", "- [ ] Task"])

    assert [entry.kind for entry in entries] == [EntryKind.HEADER, EntryKind.TASK]
    assert entries[0].header_level == 1
    assert entries[1].line_number == 2


def test_build_index_nests_tasks_under_headers():
    index = build_index(SAMPLE_DOCUMENT)

    assert _shape(index.forest) == [
        (
            "header",
            "Work",
            [
                ("task", "Task 1 @due(2024-01-01)", []),
                ("task", "Task 2", []),
                ("header", "Sub", [("task", "Task 3 @today", [])]),
            ],
        )
    ]
    assert [task.line_number for task in index.tasks] == [1, 2, 4]
    assert [entry.text for entry in index.entries if entry.is_header] == ["Work", "Sub"]


def test_equal_level_header_closes_previous_section():
    index = build_index(
        ["## A", "- [ ] a", "## B", "- [ ] b", "# C", "### D", "- [ ] d"]
    )

    assert _shape(index.forest) == [
        ("header", "A", [("task", "a", [])]),
        ("header", "B", [("task", "b", [])]),
        ("header", "C", [("header", "D", [("task", "d", [])])]),
    ]


def test_tasks_before_any_header_are_roots():
    index = build_index(["- [ ] loose", "# Later", "- [ ] nested"])

    assert _shape(index.forest) == [
        ("task", "loose", []),
        ("header", "Later", [("task", "nested", [])]),
    ]


def test_headers_without_tasks_are_pruned():
    index = build_index(
        [
            "# Empty",
            "## Also empty",
            "# Kept",
            "## Empty child",
            "## Full child",
            "- [ ] task",
            "# Trailing",
        ]
    )

    assert _shape(index.forest) == [
        ("header", "Kept", [("header", "Full child", [("task", "task", [])])])
    ]
    for node in _walk(index.forest):
        if node.entry.is_header:
            assert any(child.entry.is_task for child in _walk(node.children))


def test_documents_without_tasks_have_empty_forest():
    assert build_index([]).forest == ()
    assert build_index(["# Only", "prose"]).forest == ()
    assert build_forest([]) == []


def test_rebuilding_is_idempotent():
    first = build_index(SAMPLE_DOCUMENT)
    second = build_index(list(SAMPLE_DOCUMENT))

    assert first == second
    assert _shape(first.forest) == _shape(second.forest)


def test_forest_serializes_children():
    payload = build_index(SAMPLE_DOCUMENT).forest[0].to_dict()

    assert payload["text"] == "Work"
    assert payload["headerLevel"] == 1
    assert [child["text"] for child in payload["children"]] == [
        "Task 1 @due(2024-01-01)",
        "Task 2",
        "Sub",
    ]
