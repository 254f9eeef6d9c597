from taskpaper.decorations import LineRange, resolve_done_ranges


def _marked(lines):
    return [line_range.line for line_range in resolve_done_ranges(lines)]


def test_open_child_of_done_task_is_marked():
    lines = ["- [x] A", "  - [ ] B", "- [ ] C"]

    assert resolve_done_ranges(lines) == [LineRange(0, 0, 7), LineRange(1, 0, 9)]


def test_cancelled_task_opens_block():
    assert _marked(["- [-] A", "    note", "- [ ] B"]) == [0, 1]


def test_nested_prose_is_marked_and_shallow_prose_closes():
    lines = [
        "- [x] Done",
        "  details about it",
        "",
        "    more details",
        "Back to normal",
        "  - [ ] not in a block",
    ]

    assert _marked(lines) == [0, 1, 3]


def test_blank_lines_never_open_close_or_mark():
    assert _marked(["- [x] A", "", "   ", "  - [ ] B"]) == [0, 3]


def test_heading_closes_block():
    assert _marked(["- [x] A", "## Next", "  - [ ] B"]) == [0]


def test_nested_done_task_keeps_outer_block():
    lines = ["- [x] A", "  - [x] B", "  - [ ] C", "    - [ ] D", "- [ ] E"]

    assert _marked(lines) == [0, 1, 2, 3]


def test_shallower_done_task_restarts_block():
    lines = ["  - [x] A", "- [x] B", "  - [ ] C", "- [ ] D"]

    assert _marked(lines) == [0, 1, 2]


def test_open_tasks_outside_blocks_are_not_marked():
    assert _marked(["- [ ] A", "  - [ ] B", "text"]) == []
    assert resolve_done_ranges([]) == []


def test_ranges_cover_whole_line_without_line_ending():
    assert resolve_done_ranges(["- [x] A\r"]) == [LineRange(0, 0, 7)]
