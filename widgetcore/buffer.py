"""Text storage and line layout used by the text editing state machine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Union

NEWLINE = "\n"
"""The character that ends a line of text."""


@dataclass
class LayoutRow:
    """Shape of one displayed row of text.

    ``x0``/``x1`` are the start and end x positions of the row,
    ``baseline_y_delta`` is the distance from the previous row's baseline,
    ``ymin``/``ymax`` bound the row vertically relative to its baseline and
    ``num_chars`` is how many characters the row consumes (including a
    trailing newline).
    """

    x0: float = 0.0
    x1: float = 0.0
    baseline_y_delta: float = 0.0
    ymin: float = 0.0
    ymax: float = 0.0
    num_chars: int = 0


class TextBuffer(ABC):
    """The string being edited, together with how it is laid out on screen."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of characters in the buffer."""

    @abstractmethod
    def layout_row(self, start: int) -> LayoutRow:
        """Lay out the row of characters that begins at ``start``."""

    @abstractmethod
    def char_width(self, line_start: int, index: int) -> float:
        """Return the advance of character ``index`` of the row starting at ``line_start``."""

    @abstractmethod
    def char_at(self, index: int) -> str:
        """Return the character at ``index``."""

    @abstractmethod
    def delete_chars(self, index: int, count: int) -> None:
        """Remove ``count`` characters starting at ``index``."""

    @abstractmethod
    def insert_chars(self, index: int, chars: Union[str, Iterable[str]]) -> bool:
        """Insert ``chars`` at ``index``; return whether the insertion happened."""


class StringBuffer(TextBuffer):
    """A buffer over a Python string with fixed-width glyphs.

    Every character except a newline advances by ``char_width``; a newline
    has no width and ends its row. Each row is ``line_height`` tall. When
    ``max_length`` is given, insertions that would exceed it are refused.
    """

    def __init__(
        self,
        text: str = "",
        char_width: float = 1.0,
        line_height: float = 1.0,
        max_length: Optional[int] = None,
    ) -> None:
        if char_width < 0:
            raise ValueError("char_width must not be negative")
        if line_height <= 0:
            raise ValueError("line_height must be positive")
        if max_length is not None and max_length < 0:
            raise ValueError("max_length must not be negative")
        if max_length is not None and len(text) > max_length:
            raise ValueError("initial text is longer than max_length")
        self._text = text
        self.glyph_width = float(char_width)
        self.line_height = float(line_height)
        self.max_length = max_length

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"StringBuffer({self._text!r})"

    def _check_position(self, index: int) -> None:
        if not 0 <= index <= len(self._text):
            raise IndexError(f"position {index} is outside the buffer")

    def layout_row(self, start: int) -> LayoutRow:
        self._check_position(start)
        end = self._text.find(NEWLINE, start)
        if end == -1:
            visible = len(self._text) - start
            num_chars = visible
        else:
            visible = end - start
            num_chars = visible + 1
        return LayoutRow(
            x0=0.0,
            x1=visible * self.glyph_width,
            baseline_y_delta=self.line_height,
            ymin=0.0,
            ymax=self.line_height,
            num_chars=num_chars,
        )

    def char_width(self, line_start: int, index: int) -> float:
        return 0.0 if self.char_at(line_start + index) == NEWLINE else self.glyph_width

    def char_at(self, index: int) -> str:
        if not 0 <= index < len(self._text):
            raise IndexError(f"character index {index} is outside the buffer")
        return self._text[index]

    def delete_chars(self, index: int, count: int) -> None:
        if count < 0:
            raise ValueError("count must not be negative")
        self._check_position(index)
        if index + count > len(self._text):
            raise IndexError("deletion runs past the end of the buffer")
        self._text = self._text[:index] + self._text[index + count:]

    def insert_chars(self, index: int, chars: Union[str, Iterable[str]]) -> bool:
        self._check_position(index)
        new = chars if isinstance(chars, str) else "".join(chars)
        if self.max_length is not None and len(self._text) + len(new) > self.max_length:
            return False
        self._text = self._text[:index] + new + self._text[index:]
        return True