"""Skyline bottom-left / best-fit rectangle packing into a fixed target area."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

MAX_COORD = 0xFFFF
"""Largest coordinate; also the x/y given to rectangles that could not be packed."""

_SENTINEL_Y = 65535
_NO_FIT = 1 << 30


class Heuristic(IntEnum):
    """Strategy used to choose a position for each rectangle."""

    BL_SORT_HEIGHT = 0
    BF_SORT_HEIGHT = 1
    SKYLINE_DEFAULT = 0


@dataclass
class Rect:
    """A rectangle to pack; ``x``, ``y`` and ``was_packed`` are filled in by packing."""

    w: int
    h: int
    id: int = 0
    x: int = 0
    y: int = 0
    was_packed: bool = False


class RectPacker:
    """Packs rectangles into a ``width`` by ``height`` area using a skyline.

    ``num_nodes`` bounds how many skyline segments may exist at once. Unless
    :meth:`allow_out_of_mem` is enabled, widths are rounded up to a multiple
    of ``ceil(width / num_nodes)`` so the node budget can never run out.
    """

    def __init__(self, width: int, height: int, num_nodes: int) -> None:
        if not 0 <= width <= MAX_COORD or not 0 <= height <= MAX_COORD:
            raise ValueError("target dimensions must be between 0 and 65535")
        if num_nodes < 1:
            raise ValueError("num_nodes must be at least 1")
        self.width = width
        self.height = height
        self.num_nodes = num_nodes
        self.heuristic = Heuristic.SKYLINE_DEFAULT
        # Each node is [x, y]; the last one is a sentinel marking the right edge.
        self._skyline: List[List[int]] = [[0, 0], [width, _SENTINEL_Y]]
        self.align = 1
        self.allow_out_of_mem(False)

    def allow_out_of_mem(self, allow: bool) -> None:
        """Choose between exact widths (may run out of nodes) and quantized widths."""
        if allow:
            self.align = 1
        else:
            self.align = (self.width + self.num_nodes - 1) // self.num_nodes

    def set_heuristic(self, heuristic: int) -> None:
        """Select the placement heuristic."""
        try:
            self.heuristic = Heuristic(heuristic)
        except ValueError:
            raise ValueError(f"unknown heuristic: {heuristic!r}") from None

    @property
    def _free_nodes(self) -> int:
        return self.num_nodes + 2 - len(self._skyline)

    def _find_min_y(self, first: int, x0: int, width: int) -> Tuple[int, int]:
        sky = self._skyline
        x1 = x0 + width
        min_y = waste = visited = 0
        i = first
        while sky[i][0] < x1:
            x, y = sky[i]
            next_x = sky[i + 1][0]
            if y > min_y:
                waste += visited * (y - min_y)
                min_y = y
                visited += next_x - x0 if x < x0 else next_x - x
            else:
                under = next_x - x
                if under + visited > width:
                    under = width - visited
                waste += under * (min_y - y)
                visited += under
            i += 1
        return min_y, waste

    def _find_best_pos(self, width: int, height: int) -> Tuple[Optional[int], int, int]:
        width += self.align - 1
        width -= width % self.align

        if width > self.width or height > self.height:
            return None, 0, 0

        sky = self._skyline
        best: Optional[int] = None
        best_y = _NO_FIT
        best_waste = _NO_FIT

        i = 0
        while i < len(sky) and sky[i][0] + width <= self.width:
            y, waste = self._find_min_y(i, sky[i][0], width)
            if self.heuristic == Heuristic.BL_SORT_HEIGHT:
                if y < best_y:
                    best_y = y
                    best = i
            elif y + height <= self.height:
                if y < best_y or (y == best_y and waste < best_waste):
                    best_y = y
                    best_waste = waste
                    best = i
            i += 1

        best_x = 0 if best is None else sky[best][0]

        if self.heuristic == Heuristic.BF_SORT_HEIGHT:
            # Also try aligning the right edge with each skyline step.
            tail = 0
            while sky[tail][0] < width:
                tail += 1
            node = 0
            for tail_x, _ in sky[tail:]:
                xpos = tail_x - width
                while sky[node + 1][0] <= xpos:
                    node += 1
                y, waste = self._find_min_y(node, xpos, width)
                if y + height <= self.height and y <= best_y:
                    if (
                        y < best_y
                        or waste < best_waste
                        or (waste == best_waste and xpos < best_x)
                    ):
                        best_x = xpos
                        best_y = y
                        best_waste = waste
                        best = node

        return best, best_x, best_y

    def _pack_one(self, width: int, height: int) -> Optional[Tuple[int, int]]:
        best, x, y = self._find_best_pos(width, height)
        if best is None or y + height > self.height or self._free_nodes == 0:
            return None

        sky = self._skyline
        new_node = [x, y + height]
        right = x + width

        start = best + 1 if sky[best][0] < x else best
        end = start
        while end + 1 < len(sky) and sky[end + 1][0] <= right:
            end += 1
        if sky[end][0] < right:
            sky[end][0] = right
        self._skyline = sky[:start] + [new_node] + sky[end:]
        return x, y

    def pack(self, rects: Sequence[Rect]) -> bool:
        """Place ``rects`` in place and return whether every one of them fit.

        Rectangles are placed tallest first (then widest); rectangles that do
        not fit get ``was_packed = False`` and ``x = y = MAX_COORD``.
        Calling again continues packing into the same area.
        """
        for rect in rects:
            if not 0 <= rect.w <= MAX_COORD or not 0 <= rect.h <= MAX_COORD:
                raise ValueError("rectangle dimensions must be between 0 and 65535")

        order = sorted(rects, key=lambda r: (-r.h, -r.w))
        all_packed = True
        for rect in order:
            if rect.w == 0 or rect.h == 0:
                rect.x = rect.y = 0
                rect.was_packed = True
                continue
            placed = self._pack_one(rect.w, rect.h)
            if placed is None:
                rect.x = rect.y = MAX_COORD
                rect.was_packed = False
                all_packed = False
            else:
                rect.x, rect.y = placed
                rect.was_packed = True
        return all_packed


def pack_rects(
    width: int,
    height: int,
    sizes: Iterable[Tuple[int, int]],
    num_nodes: Optional[int] = None,
    heuristic: int = Heuristic.SKYLINE_DEFAULT,
) -> List[Rect]:
    """Pack ``(w, h)`` sizes into a new area and return rectangles in input order.

    ``num_nodes`` defaults to ``width``, which gives unquantized placement.
    Each rectangle's ``id`` is its position in ``sizes``.
    """
    packer = RectPacker(width, height, width if num_nodes is None else num_nodes)
    packer.set_heuristic(heuristic)
    rects = [Rect(w, h, id=index) for index, (w, h) in enumerate(sizes)]
    packer.pack(rects)
    return rects