# widgetcore

Building blocks for custom user-interface widgets in plain Python:

- **Rectangle packing** (`widgetcore.rectpack`): a skyline packer that places
  many small rectangles, such as glyphs or sprites, into a fixed-size area.
  It offers a bottom-left and a best-fit heuristic.
- **Text editing** (`widgetcore.textedit`, `widgetcore.buffer`,
  `widgetcore.undo`): the logic behind a single- or multi-line text field.
  It handles cursor movement, selection, mouse click and drag, cut and paste,
  insert mode, and a bounded undo/redo history.
- **Rendering helpers** (`widgetcore.fieldswapper`, `widgetcore.pingpong`):
  - `FieldSwapper` cycles through a list of fields on a step schedule;
  - `PingPong` holds a source/target pair of resources that can swap roles.

The package has no runtime dependencies.

## Installation

```
pip install widgetcore
```

For running the tests:

```
pip install "widgetcore[test]"
pytest
```

## Packing rectangles

```python
from widgetcore.rectpack import RectPacker, Rect, Heuristic, pack_rects

packer = RectPacker(256, 256, 256)
packer.set_heuristic(Heuristic.BF_SORT_HEIGHT)
rects = [Rect(w=w, h=h, id=i) for i, (w, h) in enumerate([(64, 32), (100, 100), (30, 200)])]
all_packed = packer.pack(rects)
for rect in rects:
    print(rect.id, rect.was_packed, rect.x, rect.y)
```

`Heuristic` has two strategies:

- `BL_SORT_HEIGHT` (also `SKYLINE_DEFAULT`) places each rectangle as low as
  possible, leftmost first.
- `BF_SORT_HEIGHT` also weighs the space wasted beneath a rectangle and tries
  aligning its right edge with each step of the skyline.

`pack` places rectangles tallest first, then widest. It sets `x`, `y` and
`was_packed` on each one, and returns whether every rectangle fit.

- Rectangles with zero width or height take no space. They are placed at
  `(0, 0)`.
- A rectangle that does not fit gets `was_packed = False` and
  `x = y = MAX_COORD` (65535).
- Calling `pack` again continues filling the same area.
- Target and rectangle dimensions must lie between 0 and 65535. Otherwise
  `ValueError` is raised.

`num_nodes` limits how many skyline segments can exist at once. By default,
widths are rounded up to a multiple of `ceil(width / num_nodes)`, so the
node budget never runs out. Call `allow_out_of_mem(True)` to pack at exact
widths instead. With exact widths, packing can fail once the nodes are used
up.

`pack_rects(width, height, sizes, num_nodes=None, heuristic=...)` is a
shortcut. It builds a packer, packs a list of `(w, h)` sizes and returns
`Rect` objects in input order, each with `id` set to its index. `num_nodes`
defaults to `width`.

## Editing text

```python
from widgetcore.buffer import StringBuffer
from widgetcore.textedit import TextEditState, KeyMap

keys = KeyMap()
buffer = StringBuffer("hello world")
state = TextEditState(single_line=True, keymap=keys)
state.click(buffer, 0.0, 0.0)
state.key(buffer, keys.lineend)
state.paste(buffer, "!")
print(str(buffer))  # hello world!
state.key(buffer, keys.undo)
print(str(buffer))  # hello world
```

`TextEditState` holds the cursor, the selection (`select_start`,
`select_end`), `insert_mode`, `row_count_per_page` and the undo history
(`undostate`). The methods that change the buffer or the state are:

- `click` and `drag` for the mouse;
- `cut` and `paste` for the clipboard;
- `key` for keyboard input.

The remaining methods are queries and housekeeping:

- `has_selection` reports whether there is a selection.
- `clamp` pulls the cursor and the selection back inside the buffer after the
  text was changed elsewhere.
- `reset` returns to the initial state.

`locate_coord(buffer, x, y)` returns the character position nearest to a
display point.

Page up and page down move `row_count_per_page` rows. In single-line mode,
up and down act like left and right.

### Buffers

`StringBuffer(text="", char_width=1.0, line_height=1.0, max_length=None)`
is a ready-made monospaced buffer:

- Every character except a newline advances by `char_width`.
- A newline ends its row.
- When `max_length` is set, insertions that would exceed it are refused.
- `str(buffer)` returns the text.

To supply your own storage and layout, subclass `TextBuffer` and implement
`__len__`, `layout_row`, `char_width`, `char_at`, `delete_chars` and
`insert_chars`. `layout_row` returns a `LayoutRow` that describes one
displayed row.

### Keys

A `KeyMap` assigns integer codes to the editing keys. It covers:

- `left`, `right`, `up`, `down`, `pgup`, `pgdown`;
- `linestart`, `lineend`, `textstart`, `textend`;
- `delete`, `backspace`, `undo`, `redo`, `insert`;
- `wordleft`, `wordright`;
- the optional secondary codes `linestart2`, `lineend2`, `textstart2`,
  `textend2`.

`shift` is the single bit that is or'd into a key code to extend the
selection. Other settings control text and word movement:

- `key_to_text` turns any other key into the character to insert. By default
  it maps a key to the code point with the same value.
- `is_space` drives the default word movement.
- `move_word_left` and `move_word_right` may replace the default word
  movement.

### Undo history

`UndoState(state_count=99, char_count=999)` is bounded both in the number of
records and in the number of stored characters. When either limit is reached,
the oldest undo records are discarded. Any new edit discards the redo
history. `undo(buffer)` and `redo(buffer)` return the new cursor position, or
`None` when nothing changed.

## Field swapping and ping-pong pairs

```python
from widgetcore.fieldswapper import FieldSwapper
from widgetcore.pingpong import PingPong, ResourceType

swapper = FieldSwapper()
swapper.add_field("wind")
swapper.add_field("vortex")
swapper.set_steps_per_field([3, 5])
swapper.inc_step(3)
print(swapper.current_field())  # vortex

pair = PingPong()
pair.setup(ResourceType.SOURCE, "tex_a", "rtv_a", "srv_a")
pair.setup(ResourceType.TARGET, "tex_b", "rtv_b", "srv_b")
pair.swap()
print(pair.source_texture())  # tex_b
```

`FieldSwapper` can also keep a per-field interpolation type. Set the types
with `set_interpolate_types` and read the current one with
`current_interpolate_type`, which returns 0 when none is set.

`PingPong` raises `RuntimeError` when a side is read before it has been set
up.

## What this package does not do

The package draws nothing and talks to no graphics device. It has no text
rendering, no font rasterizing, and no window or input handling. The
fields, textures and views passed to `FieldSwapper` and `PingPong` are
ordinary Python objects that the package stores and hands back. Creating the
real resources, and the display of an edited text field, are left to the
program that uses these pieces.