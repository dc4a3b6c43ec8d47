"""Bounded undo/redo history for text edits, stored in fixed-size pools."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

from widgetcore.buffer import TextBuffer

DEFAULT_STATE_COUNT = 99
DEFAULT_CHAR_COUNT = 999


@dataclass
class UndoRecord:
    """One edit in the history.

    Applying the record deletes ``delete_length`` characters at ``where`` and
    then inserts ``insert_length`` characters taken from the character pool
    starting at ``char_storage`` (``-1`` when no characters are stored).
    """

    where: int = 0
    insert_length: int = 0
    delete_length: int = 0
    char_storage: int = -1


class UndoState:
    """Undo and redo records sharing one record pool and one character pool.

    Undo records grow upward from the start of the pools and redo records
    grow downward from the end. When space runs out the oldest undo record
    is discarded; creating any new undo record discards all redo records.
    """

    def __init__(
        self,
        state_count: int = DEFAULT_STATE_COUNT,
        char_count: int = DEFAULT_CHAR_COUNT,
    ) -> None:
        if state_count < 1:
            raise ValueError("state_count must be at least 1")
        if char_count < 1:
            raise ValueError("char_count must be at least 1")
        self.state_count = state_count
        self.char_count = char_count
        self.records: List[UndoRecord] = [UndoRecord() for _ in range(state_count)]
        self.chars: List[str] = [""] * char_count
        self.undo_point = 0
        self.redo_point = state_count
        self.undo_char_point = 0
        self.redo_char_point = char_count

    def clear(self) -> None:
        """Forget all undo and redo history."""
        self.undo_point = 0
        self.undo_char_point = 0
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    def flush_redo(self) -> None:
        """Forget all redo history."""
        self.redo_point = self.state_count
        self.redo_char_point = self.char_count

    def discard_undo(self) -> None:
        """Drop the oldest undo record, releasing its stored characters."""
        if self.undo_point <= 0:
            return
        first = self.records[0]
        if first.char_storage >= 0:
            n = first.insert_length
            self.undo_char_point -= n
            self.chars[: self.undo_char_point] = self.chars[n : n + self.undo_char_point]
            for record in self.records[: self.undo_point]:
                if record.char_storage >= 0:
                    record.char_storage -= n
        self.undo_point -= 1
        for i in range(self.undo_point):
            self.records[i] = replace(self.records[i + 1])

    def discard_redo(self) -> None:
        """Drop the oldest redo record, releasing its stored characters."""
        k = self.state_count - 1
        if self.redo_point > k:
            return
        oldest = self.records[k]
        if oldest.char_storage >= 0:
            n = oldest.insert_length
            self.redo_char_point += n
            start = self.redo_char_point
            self.chars[start : self.char_count] = self.chars[start - n : self.char_count - n]
            for record in self.records[self.redo_point : k]:
                if record.char_storage >= 0:
                    record.char_storage += n
        for i in range(k, self.redo_point, -1):
            self.records[i] = replace(self.records[i - 1])
        self.redo_point += 1

    def _create_record(self, numchars: int) -> Optional[UndoRecord]:
        self.flush_redo()
        if self.undo_point == self.state_count:
            self.discard_undo()
        if numchars > self.char_count:
            self.undo_point = 0
            self.undo_char_point = 0
            return None
        while self.undo_char_point + numchars > self.char_count and self.undo_point > 0:
            self.discard_undo()
        record = self.records[self.undo_point]
        self.undo_point += 1
        return record

    def create_undo(self, pos: int, insert_len: int, delete_len: int) -> Optional[int]:
        """Add an undo record and return where its characters go in :attr:`chars`.

        Returns ``None`` when the record stores no characters, or when the
        characters cannot fit at all (in which case the history is cleared).
        """
        record = self._create_record(insert_len)
        if record is None:
            return None
        record.where = pos
        record.insert_length = insert_len
        record.delete_length = delete_len
        if insert_len == 0:
            record.char_storage = -1
            return None
        record.char_storage = self.undo_char_point
        self.undo_char_point += insert_len
        return record.char_storage

    def make_undo_insert(self, where: int, length: int) -> None:
        """Record that ``length`` characters were inserted at ``where``."""
        self.create_undo(where, 0, length)

    def make_undo_delete(self, buffer: TextBuffer, where: int, length: int) -> None:
        """Record the deletion of ``length`` characters at ``where``; call before deleting."""
        self._save(buffer, self.create_undo(where, length, 0), where, length)

    def make_undo_replace(
        self, buffer: TextBuffer, where: int, old_length: int, new_length: int
    ) -> None:
        """Record replacing ``old_length`` characters at ``where`` with ``new_length`` new ones."""
        self._save(buffer, self.create_undo(where, old_length, new_length), where, old_length)

    def _save(self, buffer: TextBuffer, storage: Optional[int], where: int, length: int) -> None:
        if storage is None:
            return
        self.chars[storage : storage + length] = [
            buffer.char_at(where + i) for i in range(length)
        ]

    def drop_last(self) -> None:
        """Forget the most recent undo record, if any."""
        if self.undo_point:
            self.undo_point -= 1

    def undo(self, buffer: TextBuffer) -> Optional[int]:
        """Revert the latest edit in ``buffer``; return the new cursor, or ``None`` if nothing changed."""
        if self.undo_point == 0:
            return None

        u = replace(self.records[self.undo_point - 1])
        r = self.records[self.redo_point - 1]
        r.char_storage = -1
        r.insert_length = u.delete_length
        r.delete_length = u.insert_length
        r.where = u.where

        if u.delete_length:
            if self.undo_char_point + u.delete_length >= self.char_count:
                # No room to keep the characters for redoing.
                r.insert_length = 0
            else:
                while self.undo_char_point + u.delete_length > self.redo_char_point:
                    if self.redo_point == self.state_count:
                        return None
                    self.discard_redo()
                r = self.records[self.redo_point - 1]
                r.char_storage = self.redo_char_point - u.delete_length
                self.redo_char_point = r.char_storage
                self.chars[r.char_storage : r.char_storage + u.delete_length] = [
                    buffer.char_at(u.where + i) for i in range(u.delete_length)
                ]
            buffer.delete_chars(u.where, u.delete_length)

        if u.insert_length:
            stored = self.chars[u.char_storage : u.char_storage + u.insert_length]
            buffer.insert_chars(u.where, "".join(stored))
            self.undo_char_point -= u.insert_length

        self.undo_point -= 1
        self.redo_point -= 1
        return u.where + u.insert_length

    def redo(self, buffer: TextBuffer) -> Optional[int]:
        """Reapply the latest undone edit; return the new cursor, or ``None`` if nothing changed."""
        if self.redo_point == self.state_count:
            return None

        u = self.records[self.undo_point]
        r = replace(self.records[self.redo_point])
        u.delete_length = r.insert_length
        u.insert_length = r.delete_length
        u.where = r.where
        u.char_storage = -1

        if r.delete_length:
            if self.undo_char_point + u.insert_length > self.redo_char_point:
                u.insert_length = 0
                u.delete_length = 0
            else:
                u.char_storage = self.undo_char_point
                self.undo_char_point += u.insert_length
                self.chars[u.char_storage : u.char_storage + u.insert_length] = [
                    buffer.char_at(u.where + i) for i in range(u.insert_length)
                ]
            buffer.delete_chars(r.where, r.delete_length)

        if r.insert_length:
            stored = self.chars[r.char_storage : r.char_storage + r.insert_length]
            buffer.insert_chars(r.where, "".join(stored))
            self.redo_char_point += r.insert_length

        self.undo_point += 1
        self.redo_point += 1
        return r.where + r.insert_length