"""Line ranges covered by completed or cancelled task blocks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from taskpaper.parser import EntryKind, parse, plain_entry


@dataclass(frozen=True)
class LineRange:
    line: int
    start: int
    end: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "start": self.start, "end": self.end}


def resolve_done_ranges(lines: Sequence[str]) -> list[LineRange]:
    """Return whole-line ranges to de-emphasize, in one forward pass.

    A completed or cancelled task opens a done block at its indentation.
    Deeper lines (tasks or prose) stay inside the block; an open task or
    non-blank line at the block's indentation or shallower closes it. Blank
    lines never change the block. A done task at the same or a shallower
    indentation restarts the block there.
    """
    ranges: list[LineRange] = []
    parent_indentation = -1
    in_done_block = False

    for line_number, raw_line in enumerate(lines):
        entry = parse(raw_line, line_number) or plain_entry(raw_line, line_number)
        line = raw_line.rstrip("\r\n")
        mark = False

        match entry.kind:
            case EntryKind.TASK if entry.completed or entry.cancelled:
                mark = True
                if not in_done_block or entry.indentation <= parent_indentation:
                    parent_indentation = entry.indentation
                    in_done_block = True
            case EntryKind.TASK:
                if in_done_block and entry.indentation > parent_indentation:
                    mark = True
                else:
                    in_done_block = False
            case EntryKind.HEADER | EntryKind.PLAIN:
                blank = not line.strip()
                if in_done_block and not blank and entry.indentation > parent_indentation:
                    mark = True
                elif not blank:
                    in_done_block = False

        if mark:
            ranges.append(LineRange(line_number, 0, len(line)))

    return ranges


def ranges_to_dict(ranges: Sequence[LineRange]) -> list[dict[str, Any]]:
    return [line_range.to_dict() for line_range in ranges]
