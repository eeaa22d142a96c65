"""Positional line diff between two version contents.

Lines are compared by index only; there is no re-alignment search. Inserting
a line near the top of a file therefore shows up as a modification on every
following line plus one trailing addition. Callers depend on this shape, so
it must not be replaced by an LCS diff.
"""

from typing import List

from ..schemas.version import DiffEntry


def format_modification(old: str, new: str) -> str:
    return f'From: "{old}" To: "{new}"'


def diff_lines(content_a: str, content_b: str) -> List[DiffEntry]:
    """Compare *content_a* (old) with *content_b* (new), line by line.

    Returns entries in ascending line order. Line numbers are 1-based
    positions in the longer of the two inputs. Identical inputs, including
    two empty strings, give an empty list.
    """
    lines_a = content_a.split("\n")
    lines_b = content_b.split("\n")
    differences: List[DiffEntry] = []

    for i in range(max(len(lines_a), len(lines_b))):
        if i >= len(lines_a):
            differences.append(DiffEntry(type="addition", line=i + 1, content=lines_b[i]))
        elif i >= len(lines_b):
            differences.append(DiffEntry(type="deletion", line=i + 1, content=lines_a[i]))
        elif lines_a[i] != lines_b[i]:
            differences.append(
                DiffEntry(
                    type="modification",
                    line=i + 1,
                    content=format_modification(lines_a[i], lines_b[i]),
                )
            )

    return differences
