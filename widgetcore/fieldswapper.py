"""Cycling through a list of fields, advancing after a per-field number of steps."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional


class FieldSwapper:
    """Holds a sequence of fields and switches between them as steps are counted.

    Each field stays current for the number of steps configured with
    :meth:`set_steps_per_field`. After that many steps the next field becomes
    current, wrapping around after the last one.
    """

    def __init__(self) -> None:
        self._fields: List[Any] = []
        self._current_index = 0
        self._steps_per_field: List[int] = []
        self._steps_num = 0
        self._steps_counter = 0
        self._interpolate_types: List[int] = []

    def current_field(self) -> Any:
        """Return the field that is current."""
        if not self._fields:
            raise IndexError("no fields have been added")
        return self._fields[self._current_index]

    def field_by_index(self, index: int) -> Optional[Any]:
        """Return the field at ``index``, or ``None`` if there is no such field."""
        if 0 <= index < len(self._fields):
            return self._fields[index]
        return None

    def current_field_index(self) -> int:
        """Return the position of the current field."""
        return self._current_index

    def current_steps_num(self) -> int:
        """Return which entry of the steps-per-field list is in use."""
        return self._steps_num

    def current_interpolate_type(self) -> int:
        """Return the interpolation type of the current field, or 0 if none is set."""
        if self._current_index >= len(self._interpolate_types):
            return 0
        return self._interpolate_types[self._current_index]

    def total_fields(self) -> int:
        """Return how many fields have been added."""
        return len(self._fields)

    def steps_per_field(self, index: int) -> int:
        """Return the configured step count at ``index``."""
        if not 0 <= index < len(self._steps_per_field):
            raise IndexError(f"no step count at index {index}")
        return self._steps_per_field[index]

    def add_field(self, field: Any) -> None:
        """Append a field to the cycle."""
        if field is None:
            raise ValueError("field must not be None")
        self._fields.append(field)

    def next_field(self) -> None:
        """Make the following field current, wrapping after the last."""
        if not self._fields:
            raise IndexError("no fields have been added")
        self._current_index = (self._current_index + 1) % len(self._fields)

    def set_steps_per_field(self, steps: Iterable[int]) -> None:
        """Set how many steps each field stays current and restart from the first entry."""
        self._steps_per_field = list(steps)
        self._steps_num = 0

    def set_interpolate_types(self, types: Iterable[int]) -> None:
        """Set the interpolation type of each field."""
        self._interpolate_types = list(types)

    def inc_step(self, inc: int = 1) -> None:
        """Count ``inc`` steps, switching fields whenever a field's count is reached."""
        for _ in range(inc):
            if self._steps_num >= len(self._steps_per_field):
                raise IndexError("no step count configured for the current field")
            self._steps_counter += 1
            if self._steps_counter == self._steps_per_field[self._steps_num]:
                if not self._fields:
                    raise IndexError("no fields have been added")
                self._steps_num = (self._steps_num + 1) % len(self._fields)
                self._steps_counter = 0
                self.next_field()