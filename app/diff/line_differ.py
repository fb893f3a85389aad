"""
Line-level diff of two text versions.

Implements the linear-space variant of the Myers O(ND) shortest edit script:
each range is bisected at the middle snake found by searching forward and
backward at once, and the halves are solved recursively. Common prefixes and
suffixes are peeled off at every level and ranges sharing no line at all are
replaced outright, so a full rewrite costs linear time. Inside a change block
removals come before additions.

A file whose only change is its trailing newline diffs to context lines only;
``FileDiff.eol_changed`` carries that fact.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from app.models.diff import DiffLine, LineType

# (op, old_index, new_index); the index not used by the op is -1
EditOp = Tuple[LineType, int, int]


def split_lines(text: Optional[str]) -> List[str]:
    """
    Split ``text`` on newlines without a phantom last line.

    ``"a\\nb\\n"`` and ``"a\\nb"`` both give ``["a", "b"]``; ``None`` and
    ``""`` give no lines.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def trailing_newline_changed(old_text: Optional[str], new_text: Optional[str]) -> bool:
    """True when both versions have content and only one ends with a newline."""
    if not old_text or not new_text:
        return False
    return old_text.endswith("\n") != new_text.endswith("\n")


def _intern(old: Sequence[str], new: Sequence[str]) -> Tuple[List[int], List[int]]:
    """Map lines to small ints so the search compares ints, not strings."""
    ids: Dict[str, int] = {}
    old_ids = [ids.setdefault(line, len(ids)) for line in old]
    new_ids = [ids.setdefault(line, len(ids)) for line in new]
    return old_ids, new_ids


def _middle_snake(
    a: Sequence[int], b: Sequence[int], a_lo: int, a_hi: int, b_lo: int, b_hi: int
) -> Optional[Tuple[int, int]]:
    """
    Split point of an optimal path through ``a[a_lo:a_hi]`` / ``b[b_lo:b_hi]``.

    Returns offsets relative to ``a_lo``/``b_lo``, or ``None`` when the ranges
    have nothing in common.
    """
    n, m = a_hi - a_lo, b_hi - b_lo
    max_d = (n + m + 1) // 2
    offset = max_d
    size = 2 * max_d
    forward = [-1] * size
    backward = [-1] * size
    forward[offset + 1] = 0
    backward[offset + 1] = 0
    delta = n - m
    odd = delta % 2 != 0
    # diagonals that left the grid are skipped from then on
    f_start = f_end = b_start = b_end = 0

    for d in range(max_d):
        for k in range(-d + f_start, d + 1 - f_end, 2):
            k_off = offset + k
            if k == -d or (k != d and forward[k_off - 1] < forward[k_off + 1]):
                x = forward[k_off + 1]
            else:
                x = forward[k_off - 1] + 1
            y = x - k
            while x < n and y < m and a[a_lo + x] == b[b_lo + y]:
                x += 1
                y += 1
            forward[k_off] = x
            if x > n:
                f_end += 2
            elif y > m:
                f_start += 2
            elif odd:
                r_off = offset + delta - k
                if 0 <= r_off < size and backward[r_off] != -1:
                    if x >= n - backward[r_off]:
                        return x, y

        for k in range(-d + b_start, d + 1 - b_end, 2):
            k_off = offset + k
            if k == -d or (k != d and backward[k_off - 1] < backward[k_off + 1]):
                x = backward[k_off + 1]
            else:
                x = backward[k_off - 1] + 1
            y = x - k
            while x < n and y < m and a[a_hi - 1 - x] == b[b_hi - 1 - y]:
                x += 1
                y += 1
            backward[k_off] = x
            if x > n:
                b_end += 2
            elif y > m:
                b_start += 2
            elif not odd:
                f_off = offset + delta - k
                if 0 <= f_off < size and forward[f_off] != -1:
                    fx = forward[f_off]
                    if fx >= n - x:
                        return fx, offset + fx - f_off

    return None


def _compare(
    a: Sequence[int],
    b: Sequence[int],
    a_lo: int,
    a_hi: int,
    b_lo: int,
    b_hi: int,
    ops: List[EditOp],
) -> None:
    """Append the edit script for ``a[a_lo:a_hi]`` -> ``b[b_lo:b_hi]`` to ``ops``."""
    while a_lo < a_hi and b_lo < b_hi and a[a_lo] == b[b_lo]:
        ops.append((LineType.CONTEXT, a_lo, b_lo))
        a_lo += 1
        b_lo += 1

    suffix = 0
    while a_lo < a_hi and b_lo < b_hi and a[a_hi - 1] == b[b_hi - 1]:
        a_hi -= 1
        b_hi -= 1
        suffix += 1

    split = None
    if a_lo < a_hi and b_lo < b_hi and not set(a[a_lo:a_hi]).isdisjoint(b[b_lo:b_hi]):
        split = _middle_snake(a, b, a_lo, a_hi, b_lo, b_hi)

    if split is None:
        ops.extend((LineType.REMOVED, i, -1) for i in range(a_lo, a_hi))
        ops.extend((LineType.ADDED, -1, j) for j in range(b_lo, b_hi))
    else:
        x, y = split
        _compare(a, b, a_lo, a_lo + x, b_lo, b_lo + y, ops)
        _compare(a, b, a_lo + x, a_hi, b_lo + y, b_hi, ops)

    ops.extend((LineType.CONTEXT, a_hi + s, b_hi + s) for s in range(suffix))


def _removals_first(ops: List[EditOp]) -> List[EditOp]:
    ordered: List[EditOp] = []
    removed: List[EditOp] = []
    added: List[EditOp] = []
    for op in ops:
        if op[0] is LineType.CONTEXT:
            ordered.extend(removed)
            ordered.extend(added)
            removed.clear()
            added.clear()
            ordered.append(op)
        elif op[0] is LineType.REMOVED:
            removed.append(op)
        else:
            added.append(op)
    ordered.extend(removed)
    ordered.extend(added)
    return ordered


def edit_script(old: Sequence[str], new: Sequence[str]) -> List[EditOp]:
    """Edit operations from ``old`` lines to ``new`` lines."""
    a, b = _intern(old, new)
    ops: List[EditOp] = []
    _compare(a, b, 0, len(a), 0, len(b), ops)
    return _removals_first(ops)


def diff(old_text: Optional[str], new_text: Optional[str]) -> List[DiffLine]:
    """
    Diff two versions of a file.

    Args:
        old_text: Previous content, ``None`` when the file is new
        new_text: Current content, ``None`` when the file was deleted

    Returns:
        List[DiffLine]: Every line of both versions, classified and numbered
    """
    old_lines = split_lines(old_text)
    new_lines = split_lines(new_text)

    lines: List[DiffLine] = []
    old_no = new_no = 1
    for op, i, j in edit_script(old_lines, new_lines):
        if op is LineType.CONTEXT:
            lines.append(
                DiffLine(
                    type=op,
                    content=new_lines[j],
                    old_line_number=old_no,
                    new_line_number=new_no,
                )
            )
            old_no += 1
            new_no += 1
        elif op is LineType.REMOVED:
            lines.append(DiffLine(type=op, content=old_lines[i], old_line_number=old_no))
            old_no += 1
        else:
            lines.append(DiffLine(type=op, content=new_lines[j], new_line_number=new_no))
            new_no += 1
    return lines
