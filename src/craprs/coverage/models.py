"""Line coverage data model.

File-centric: one FileCoverage per source file, holding only the lines the
coverage tool instrumented. A line with no executable code is absent, never
zero.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(slots=True)
class FileCoverage:
    """Coverage data for a single file.

    Lines are stored as a dict mapping line number → hit count.
    Line numbers are 1-based to match source file conventions.
    """

    path: str  # normalized, project-relative where possible
    lines: dict[int, int] = field(default_factory=dict)  # line_number → hit_count

    def record(self, line: int, hits: int) -> None:
        """Add a line hit count, keeping the maximum on repeats."""
        previous = self.lines.get(line)
        if previous is None or hits > previous:
            self.lines[line] = hits

    def ordered_lines(self) -> Iterator[tuple[int, int]]:
        """(line, hits) pairs in ascending line order."""
        for line in sorted(self.lines):
            yield line, self.lines[line]

    @property
    def lines_found(self) -> int:
        """Total number of instrumented lines."""
        return len(self.lines)

    @property
    def lines_hit(self) -> int:
        """Number of lines with at least one hit."""
        return sum(1 for hits in self.lines.values() if hits > 0)


@dataclass(slots=True)
class CoverageReport:
    """Coverage map for a whole project, keyed by normalized path."""

    source_format: str
    files: dict[str, FileCoverage] = field(default_factory=dict)  # path → coverage

    @property
    def lines_found(self) -> int:
        return sum(f.lines_found for f in self.files.values())

    @property
    def lines_hit(self) -> int:
        return sum(f.lines_hit for f in self.files.values())
