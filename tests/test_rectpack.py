import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from widgetcore.rectpack import (
    MAX_COORD,
    Heuristic,
    Rect,
    RectPacker,
    pack_rects,
)


def _overlaps(a, b):
    return a.x < b.x + b.w and b.x < a.x + a.w and a.y < b.y + b.h and b.y < a.y + a.h


def test_single_rect_at_origin():
    rects = pack_rects(64, 64, [(10, 20)])
    assert (rects[0].x, rects[0].y, rects[0].was_packed) == (0, 0, True)


def test_two_equal_rects_fill_row():
    rects = pack_rects(20, 10, [(10, 10), (10, 10)])
    assert all(r.was_packed for r in rects)
    assert sorted((r.x, r.y) for r in rects) == [(0, 0), (10, 0)]


def test_stacking_in_narrow_column():
    rects = pack_rects(10, 30, [(10, 10)] * 3)
    assert all(r.was_packed for r in rects)
    assert sorted(r.y for r in rects) == [0, 10, 20]
    assert {r.x for r in rects} == {0}


def test_too_wide_rect_fails():
    packer = RectPacker(32, 32, 32)
    rect = Rect(33, 4)
    assert packer.pack([rect]) is False
    assert rect.was_packed is False
    assert (rect.x, rect.y) == (MAX_COORD, MAX_COORD)


def test_too_tall_rect_fails():
    rects = pack_rects(32, 32, [(4, 40)])
    assert rects[0].was_packed is False


def test_empty_rect_needs_no_space():
    packer = RectPacker(4, 4, 4)
    rects = [Rect(0, 5), Rect(4, 4)]
    assert packer.pack(rects) is True
    assert (rects[0].x, rects[0].y) == (0, 0)
    assert (rects[1].x, rects[1].y) == (0, 0)


def test_order_and_ids_preserved():
    sizes = [(3, 1), (5, 9), (2, 4)]
    rects = pack_rects(50, 50, sizes)
    assert [r.id for r in rects] == [0, 1, 2]
    assert [(r.w, r.h) for r in rects] == sizes


def test_overflow_reports_failure():
    packer = RectPacker(10, 10, 10)
    rects = [Rect(10, 10), Rect(10, 10)]
    assert packer.pack(rects) is False
    assert [r.was_packed for r in rects].count(True) == 1


def test_repeated_pack_continues_in_same_area():
    packer = RectPacker(10, 20, 10)
    first = Rect(10, 10)
    second = Rect(10, 10)
    assert packer.pack([first]) is True
    assert packer.pack([second]) is True
    assert not _overlaps(first, second)


def test_node_budget_exhausted():
    packer = RectPacker(100, 100, 1)
    packer.allow_out_of_mem(True)
    rects = [Rect(10, 10), Rect(10, 10)]
    assert packer.pack(rects) is False
    assert [r.was_packed for r in rects].count(True) == 1


def test_quantized_width_uses_alignment():
    packer = RectPacker(100, 100, 1)
    assert packer.align == 100
    packer.allow_out_of_mem(True)
    assert packer.align == 1


def test_invalid_heuristic():
    packer = RectPacker(10, 10, 10)
    with pytest.raises(ValueError):
        packer.set_heuristic(7)


def test_heuristic_is_set():
    packer = RectPacker(10, 10, 10)
    packer.set_heuristic(Heuristic.BF_SORT_HEIGHT)
    assert packer.heuristic is Heuristic.BF_SORT_HEIGHT


@pytest.mark.parametrize("width,height", [(MAX_COORD + 1, 10), (10, MAX_COORD + 1)])
def test_target_too_large(width, height):
    with pytest.raises(ValueError):
        RectPacker(width, height, 10)


def test_zero_nodes_rejected():
    with pytest.raises(ValueError):
        RectPacker(10, 10, 0)


def test_rect_too_large_rejected():
    packer = RectPacker(10, 10, 10)
    with pytest.raises(ValueError):
        packer.pack([Rect(MAX_COORD + 1, 1)])


@pytest.mark.parametrize("heuristic", list(Heuristic))
def test_exact_fit_packs_all(heuristic):
    rects = pack_rects(8, 8, [(4, 4)] * 4, heuristic=heuristic)
    assert all(r.was_packed for r in rects)
    assert sorted((r.x, r.y) for r in rects) == [(0, 0), (0, 4), (4, 0), (4, 4)]


@settings(max_examples=60, deadline=None)
@given(
    sizes=st.lists(
        st.tuples(st.integers(1, 20), st.integers(1, 20)), min_size=1, max_size=25
    ),
    heuristic=st.sampled_from([Heuristic.BL_SORT_HEIGHT, Heuristic.BF_SORT_HEIGHT]),
    allow=st.booleans(),
)
def test_packed_rects_in_bounds_and_disjoint(sizes, heuristic, allow):
    packer = RectPacker(64, 64, 16)
    packer.allow_out_of_mem(allow)
    packer.set_heuristic(heuristic)
    rects = [Rect(w, h, id=i) for i, (w, h) in enumerate(sizes)]
    result = packer.pack(rects)
    packed = [r for r in rects if r.was_packed]
    assert result == (len(packed) == len(rects))
    for r in packed:
        assert 0 <= r.x and r.x + r.w <= 64
        assert 0 <= r.y and r.y + r.h <= 64
    for i, a in enumerate(packed):
        for b in packed[i + 1:]:
            assert not _overlaps(a, b)
    for r in rects:
        if not r.was_packed:
            assert (r.x, r.y) == (MAX_COORD, MAX_COORD)