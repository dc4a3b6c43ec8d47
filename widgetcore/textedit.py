"""Cursor, selection and keyboard/mouse handling for an editable text field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from widgetcore.buffer import NEWLINE, LayoutRow, TextBuffer
from widgetcore.undo import UndoState

_KEY_BASE = 0x200000


def _default_key_to_text(key: int) -> Optional[str]:
    """Treat any valid code point as the character to insert."""
    if 0 < key <= 0x10FFFF:
        return chr(key)
    return None


@dataclass
class KeyMap:
    """Integer codes for editing keys and how plain key codes become text.

    ``shift`` is a single bit or'd into a key code to extend the selection.
    Keys left as ``None`` are not handled. ``key_to_text`` returns the
    character a key inserts, or ``None``. ``is_space`` drives the default
    word movement; ``move_word_left``/``move_word_right`` may replace it.
    """

    shift: int = 0x400000
    left: int = _KEY_BASE + 0
    right: int = _KEY_BASE + 1
    up: int = _KEY_BASE + 2
    down: int = _KEY_BASE + 3
    pgup: int = _KEY_BASE + 4
    pgdown: int = _KEY_BASE + 5
    linestart: int = _KEY_BASE + 6
    lineend: int = _KEY_BASE + 7
    textstart: int = _KEY_BASE + 8
    textend: int = _KEY_BASE + 9
    delete: int = _KEY_BASE + 10
    backspace: int = _KEY_BASE + 11
    undo: int = _KEY_BASE + 12
    redo: int = _KEY_BASE + 13
    insert: Optional[int] = _KEY_BASE + 14
    wordleft: Optional[int] = _KEY_BASE + 15
    wordright: Optional[int] = _KEY_BASE + 16
    linestart2: Optional[int] = None
    lineend2: Optional[int] = None
    textstart2: Optional[int] = None
    textend2: Optional[int] = None
    key_to_text: Callable[[int], Optional[str]] = _default_key_to_text
    is_space: Optional[Callable[[str], bool]] = str.isspace
    move_word_left: Optional[Callable[[TextBuffer, int], int]] = None
    move_word_right: Optional[Callable[[TextBuffer, int], int]] = None

    def __post_init__(self) -> None:
        if self.shift <= 0 or self.shift & (self.shift - 1):
            raise ValueError("shift must be a single bit")

    def shifted(self, code: Optional[int]) -> Optional[int]:
        """Return ``code`` with the shift bit set, or ``None``."""
        return None if code is None else code | self.shift


@dataclass
class _FindState:
    x: float = 0.0
    y: float = 0.0
    height: float = 0.0
    first_char: int = 0
    length: int = 0
    prev_first: int = 0


def locate_coord(buffer: TextBuffer, x: float, y: float) -> int:
    """Return the character position nearest to the display point ``(x, y)``."""
    n = len(buffer)
    base_y = 0.0
    i = 0
    row = LayoutRow()

    while i < n:
        row = buffer.layout_row(i)
        if row.num_chars <= 0:
            return n
        if i == 0 and y < base_y + row.ymin:
            return 0
        if y < base_y + row.ymax:
            break
        i += row.num_chars
        base_y += row.baseline_y_delta

    if i >= n:
        return n

    if x < row.x0:
        return i

    if x < row.x1:
        prev_x = row.x0
        for k in range(row.num_chars):
            w = buffer.char_width(i, k)
            if x < prev_x + w:
                return i + k if x < prev_x + w / 2 else i + k + 1
            prev_x += w

    last = i + row.num_chars - 1
    if buffer.char_at(last) == NEWLINE:
        return last
    return i + row.num_chars


def _is_word_boundary(buffer: TextBuffer, idx: int, is_space: Callable[[str], bool]) -> bool:
    if idx <= 0:
        return True
    return is_space(buffer.char_at(idx - 1)) and not is_space(buffer.char_at(idx))


def _word_previous(buffer: TextBuffer, c: int, is_space: Callable[[str], bool]) -> int:
    c -= 1
    while c >= 0 and not _is_word_boundary(buffer, c, is_space):
        c -= 1
    return max(c, 0)


def _word_next(buffer: TextBuffer, c: int, is_space: Callable[[str], bool]) -> int:
    length = len(buffer)
    c += 1
    while c < length and not _is_word_boundary(buffer, c, is_space):
        c += 1
    return min(c, length)


class TextEditState:
    """Cursor, selection, insert mode and undo history of one text field."""

    def __init__(self, single_line: bool = False, keymap: Optional[KeyMap] = None) -> None:
        self.keymap = keymap if keymap is not None else KeyMap()
        self.undostate = UndoState()
        self.reset(single_line)

    def reset(self, single_line: bool = False) -> None:
        """Return to the initial state, forgetting the undo history."""
        self.undostate.clear()
        self.cursor = 0
        self.select_start = 0
        self.select_end = 0
        self.has_preferred_x = False
        self.preferred_x = 0.0
        self.single_line = bool(single_line)
        self.insert_mode = False
        self.row_count_per_page = 0

    def has_selection(self) -> bool:
        """Return whether a non-empty selection exists."""
        return self.select_start != self.select_end

    def clamp(self, buffer: TextBuffer) -> None:
        """Keep cursor and selection inside the buffer after outside changes."""
        n = len(buffer)
        if self.has_selection():
            self.select_start = min(self.select_start, n)
            self.select_end = min(self.select_end, n)
            if self.select_start == self.select_end:
                self.cursor = self.select_start
        self.cursor = min(self.cursor, n)

    # mouse

    def _single_line_y(self, buffer: TextBuffer, y: float) -> float:
        if self.single_line:
            return buffer.layout_row(0).ymin
        return y

    def click(self, buffer: TextBuffer, x: float, y: float) -> None:
        """Move the cursor to the clicked point and clear the selection."""
        y = self._single_line_y(buffer, y)
        self.cursor = locate_coord(buffer, x, y)
        self.select_start = self.select_end = self.cursor
        self.has_preferred_x = False

    def drag(self, buffer: TextBuffer, x: float, y: float) -> None:
        """Extend the selection to the dragged-to point."""
        y = self._single_line_y(buffer, y)
        if self.select_start == self.select_end:
            self.select_start = self.cursor
        self.cursor = self.select_end = locate_coord(buffer, x, y)

    # selection helpers

    def _delete(self, buffer: TextBuffer, where: int, length: int) -> None:
        self.undostate.make_undo_delete(buffer, where, length)
        buffer.delete_chars(where, length)
        self.has_preferred_x = False

    def _delete_selection(self, buffer: TextBuffer) -> None:
        self.clamp(buffer)
        if not self.has_selection():
            return
        if self.select_start < self.select_end:
            self._delete(buffer, self.select_start, self.select_end - self.select_start)
            self.select_end = self.cursor = self.select_start
        else:
            self._delete(buffer, self.select_end, self.select_start - self.select_end)
            self.select_start = self.cursor = self.select_end
        self.has_preferred_x = False

    def _sort_selection(self) -> None:
        if self.select_end < self.select_start:
            self.select_start, self.select_end = self.select_end, self.select_start

    def _move_to_first(self) -> None:
        if self.has_selection():
            self._sort_selection()
            self.cursor = self.select_end = self.select_start
            self.has_preferred_x = False

    def _move_to_last(self, buffer: TextBuffer) -> None:
        if self.has_selection():
            self._sort_selection()
            self.clamp(buffer)
            self.cursor = self.select_start = self.select_end
            self.has_preferred_x = False

    def _prep_selection_at_cursor(self) -> None:
        if not self.has_selection():
            self.select_start = self.select_end = self.cursor
        else:
            self.cursor = self.select_end

    # clipboard

    def cut(self, buffer: TextBuffer) -> bool:
        """Delete the selection; return whether there was one."""
        if self.has_selection():
            self._delete_selection(buffer)
            self.has_preferred_x = False
            return True
        return False

    def paste(self, buffer: TextBuffer, chars: str) -> bool:
        """Replace the selection (or insert at the cursor) with ``chars``."""
        self.clamp(buffer)
        self._delete_selection(buffer)
        if buffer.insert_chars(self.cursor, chars):
            self.undostate.make_undo_insert(self.cursor, len(chars))
            self.cursor += len(chars)
            self.has_preferred_x = False
            return True
        self.undostate.drop_last()
        return False

    # layout queries

    def _find_charpos(self, buffer: TextBuffer, n: int) -> _FindState:
        find = _FindState()
        z = len(buffer)
        i = 0
        prev_start = 0

        if n == z:
            if self.single_line:
                row = buffer.layout_row(0)
                find.length = z
                find.height = row.ymax - row.ymin
                find.x = row.x1
            else:
                find.height = 1.0
                while i < z:
                    row = buffer.layout_row(i)
                    if row.num_chars <= 0:
                        break
                    prev_start = i
                    i += row.num_chars
                find.first_char = i
                find.length = 0
                find.prev_first = prev_start
            return find

        while True:
            row = buffer.layout_row(i)
            if n < i + row.num_chars or row.num_chars <= 0:
                break
            prev_start = i
            i += row.num_chars
            find.y += row.baseline_y_delta

        find.first_char = i
        find.length = row.num_chars
        find.height = row.ymax - row.ymin
        find.prev_first = prev_start
        find.x = row.x0
        for k in range(n - i):
            find.x += buffer.char_width(i, k)
        return find

    def _word_left(self, buffer: TextBuffer, c: int) -> int:
        if self.keymap.move_word_left is not None:
            return self.keymap.move_word_left(buffer, c)
        return _word_previous(buffer, c, self.keymap.is_space)

    def _word_right(self, buffer: TextBuffer, c: int) -> int:
        if self.keymap.move_word_right is not None:
            return self.keymap.move_word_right(buffer, c)
        return _word_next(buffer, c, self.keymap.is_space)

    # keyboard

    def key(self, buffer: TextBuffer, key: int) -> None:
        """Apply one keyboard input to ``buffer`` and the state."""
        km = self.keymap
        sh = km.shifted

        def hit(*codes: Optional[int]) -> bool:
            return any(code is not None and key == code for code in codes)

        word_left = km.move_word_left is not None or km.is_space is not None
        word_right = km.move_word_right is not None or km.is_space is not None

        if hit(km.insert):
            self.insert_mode = not self.insert_mode
        elif hit(km.undo):
            cursor = self.undostate.undo(buffer)
            if cursor is not None:
                self.cursor = cursor
            self.has_preferred_x = False
        elif hit(km.redo):
            cursor = self.undostate.redo(buffer)
            if cursor is not None:
                self.cursor = cursor
            self.has_preferred_x = False
        elif hit(km.left):
            if self.has_selection():
                self._move_to_first()
            elif self.cursor > 0:
                self.cursor -= 1
            self.has_preferred_x = False
        elif hit(km.right):
            if self.has_selection():
                self._move_to_last(buffer)
            else:
                self.cursor += 1
            self.clamp(buffer)
            self.has_preferred_x = False
        elif hit(sh(km.left)):
            self.clamp(buffer)
            self._prep_selection_at_cursor()
            if self.select_end > 0:
                self.select_end -= 1
            self.cursor = self.select_end
            self.has_preferred_x = False
        elif word_left and hit(km.wordleft):
            if self.has_selection():
                self._move_to_first()
            else:
                self.cursor = self._word_left(buffer, self.cursor)
                self.clamp(buffer)
        elif word_left and hit(sh(km.wordleft)):
            if not self.has_selection():
                self._prep_selection_at_cursor()
            self.cursor = self.select_end = self._word_left(buffer, self.cursor)
            self.clamp(buffer)
        elif word_right and hit(km.wordright):
            if self.has_selection():
                self._move_to_last(buffer)
            else:
                self.cursor = self._word_right(buffer, self.cursor)
                self.clamp(buffer)
        elif word_right and hit(sh(km.wordright)):
            if not self.has_selection():
                self._prep_selection_at_cursor()
            self.cursor = self.select_end = self._word_right(buffer, self.cursor)
            self.clamp(buffer)
        elif hit(sh(km.right)):
            self._prep_selection_at_cursor()
            self.select_end += 1
            self.clamp(buffer)
            self.cursor = self.select_end
            self.has_preferred_x = False
        elif hit(km.down, sh(km.down), km.pgdown, sh(km.pgdown)):
            self._move_down(buffer, key)
        elif hit(km.up, sh(km.up), km.pgup, sh(km.pgup)):
            self._move_up(buffer, key)
        elif hit(km.delete, sh(km.delete)):
            if self.has_selection():
                self._delete_selection(buffer)
            elif self.cursor < len(buffer):
                self._delete(buffer, self.cursor, 1)
            self.has_preferred_x = False
        elif hit(km.backspace, sh(km.backspace)):
            if self.has_selection():
                self._delete_selection(buffer)
            else:
                self.clamp(buffer)
                if self.cursor > 0:
                    self._delete(buffer, self.cursor - 1, 1)
                    self.cursor -= 1
            self.has_preferred_x = False
        elif hit(km.textstart, km.textstart2):
            self.cursor = self.select_start = self.select_end = 0
            self.has_preferred_x = False
        elif hit(km.textend, km.textend2):
            self.cursor = len(buffer)
            self.select_start = self.select_end = 0
            self.has_preferred_x = False
        elif hit(sh(km.textstart), sh(km.textstart2)):
            self._prep_selection_at_cursor()
            self.cursor = self.select_end = 0
            self.has_preferred_x = False
        elif hit(sh(km.textend), sh(km.textend2)):
            self._prep_selection_at_cursor()
            self.cursor = self.select_end = len(buffer)
            self.has_preferred_x = False
        elif hit(km.linestart, km.linestart2):
            self.clamp(buffer)
            self._move_to_first()
            self._seek_line_start(buffer)
            self.has_preferred_x = False
        elif hit(km.lineend, km.lineend2):
            self.clamp(buffer)
            self._move_to_first()
            self._seek_line_end(buffer)
            self.has_preferred_x = False
        elif hit(sh(km.linestart), sh(km.linestart2)):
            self.clamp(buffer)
            self._prep_selection_at_cursor()
            self._seek_line_start(buffer)
            self.select_end = self.cursor
            self.has_preferred_x = False
        elif hit(sh(km.lineend), sh(km.lineend2)):
            self.clamp(buffer)
            self._prep_selection_at_cursor()
            self._seek_line_end(buffer)
            self.select_end = self.cursor
            self.has_preferred_x = False
        else:
            self._type_char(buffer, key)

    def _seek_line_start(self, buffer: TextBuffer) -> None:
        if self.single_line:
            self.cursor = 0
            return
        while self.cursor > 0 and buffer.char_at(self.cursor - 1) != NEWLINE:
            self.cursor -= 1

    def _seek_line_end(self, buffer: TextBuffer) -> None:
        n = len(buffer)
        if self.single_line:
            self.cursor = n
            return
        while self.cursor < n and buffer.char_at(self.cursor) != NEWLINE:
            self.cursor += 1

    def _type_char(self, buffer: TextBuffer, key: int) -> None:
        ch = self.keymap.key_to_text(key)
        if not ch:
            return
        if ch == NEWLINE and self.single_line:
            return
        if self.insert_mode and not self.has_selection() and self.cursor < len(buffer):
            self.undostate.make_undo_replace(buffer, self.cursor, 1, 1)
            buffer.delete_chars(self.cursor, 1)
            if buffer.insert_chars(self.cursor, ch):
                self.cursor += 1
                self.has_preferred_x = False
        else:
            self._delete_selection(buffer)
            if buffer.insert_chars(self.cursor, ch):
                self.undostate.make_undo_insert(self.cursor, 1)
                self.cursor += 1
                self.has_preferred_x = False

    def _advance_in_row(self, buffer: TextBuffer, row_start: int, goal_x: float) -> None:
        row = buffer.layout_row(row_start)
        self.cursor = row_start
        x = row.x0
        for i in range(row.num_chars):
            x += buffer.char_width(row_start, i)
            if x > goal_x:
                break
            self.cursor += 1
        self.clamp(buffer)

    def _move_down(self, buffer: TextBuffer, key: int) -> None:
        km = self.keymap
        sel = bool(key & km.shift)
        is_page = (key & ~km.shift) == km.pgdown
        row_count = self.row_count_per_page if is_page else 1

        if not is_page and self.single_line:
            self.key(buffer, km.right | (key & km.shift))
            return

        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection():
            self._move_to_last(buffer)

        self.clamp(buffer)
        find = self._find_charpos(buffer, self.cursor)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            start = find.first_char + find.length
            if find.length == 0:
                break
            # Moving down from the last line must not jump to its end.
            if buffer.char_at(start - 1) != NEWLINE:
                break
            self._advance_in_row(buffer, start, goal_x)
            self.has_preferred_x = True
            self.preferred_x = goal_x
            if sel:
                self.select_end = self.cursor
            find.first_char = start
            find.length = buffer.layout_row(start).num_chars

    def _move_up(self, buffer: TextBuffer, key: int) -> None:
        km = self.keymap
        sel = bool(key & km.shift)
        is_page = (key & ~km.shift) == km.pgup
        row_count = self.row_count_per_page if is_page else 1

        if not is_page and self.single_line:
            self.key(buffer, km.left | (key & km.shift))
            return

        if sel:
            self._prep_selection_at_cursor()
        elif self.has_selection():
            self._move_to_first()

        self.clamp(buffer)
        find = self._find_charpos(buffer, self.cursor)

        for _ in range(row_count):
            goal_x = self.preferred_x if self.has_preferred_x else find.x
            if find.prev_first == find.first_char:
                break
            self._advance_in_row(buffer, find.prev_first, goal_x)
            self.has_preferred_x = True
            self.preferred_x = goal_x
            if sel:
                self.select_end = self.cursor
            prev_scan = find.prev_first - 1 if find.prev_first > 0 else 0
            while prev_scan > 0 and buffer.char_at(prev_scan - 1) != NEWLINE:
                prev_scan -= 1
            find.first_char = find.prev_first
            find.prev_first = prev_scan