# funscriptkit

A library for working with funscripts: timed lists of position actions
(0–100) that drive motion alongside a video. It gives you the editing model
of a script editor: actions, selection, undo and redo, spline sampling and a
speed heatmap. It has no user interface.

## Modules

- `funscriptkit.action`
  - `FunscriptAction` is a frozen dataclass with `at_s` (seconds), `pos`, `tag`
    and `flags`. Actions sort by time. Two actions are equal when their time and
    position match. `with_time` and `with_pos` return changed copies.
  - `FunscriptArray` is a sequence of actions kept in time order, with at most
    one action per timestamp. It has `add`, `add_unsorted`, `find`, `remove`,
    `lower_bound`, `upper_bound`, `sort`, `clear` and `copy`.
- `funscriptkit.funscript`
  - `Funscript` is the editable script. It adds, edits and removes actions and
    looks actions up: `get_action_at_time`, `closest_action`,
    `next_action_ahead`, `previous_action_behind`. It interpolates positions
    with `position_at_time`, and `spline` and `spline_clamped` sample the
    actions as a spline.
  - Its selection tools are `select_time`, `select_all`, `select_top_actions`,
    `select_bottom_actions`, `select_mid_actions`, `move_selection_time`,
    `move_selection_position`, `equalize_selection`, `invert_selection` and
    `range_extend_selection`.
  - Changes are collected and delivered when you call `update()` to callbacks
    registered with `add_listener`. The events are `"actions_changed"`,
    `"selection_changed"` and `"name_changed"`.
  - `to_json` builds the JSON-ready dict, with millisecond timestamps and the
    metadata. `from_json` loads actions from such a dict and returns its
    `Metadata`. It raises `ValueError` when there is no action array.
  - `FunscriptData` holds the actions and the selection. `Metadata` holds the
    descriptive fields.
- `funscriptkit.undo`: `FunscriptUndoSystem` keeps snapshot stacks of a
  script's data (`snapshot`, `undo`, `redo`, `clear_redo`, `match_undo_top`,
  `undo_empty`, `redo_empty`). `ScriptState` is one saved snapshot.
- `funscriptkit.spline`: Catmull-Rom sampling. It offers `FunscriptSpline.sample`,
  which caches the last segment it used, plus `catmull_rom_spline` and
  `sample_at_index`.
- `funscriptkit.strokes`: helpers that work on plain action arrays. These are
  `get_action_at_time`, `position_at_time`, `last_stroke`, `stretch_position`
  and `range_extend`.
- `funscriptkit.heatmap`
  - `speed_buffer` gives the average stroke speed per time slot, scaled to 0..1.
  - `ramp_color` maps a speed to a colour on a black, blue, cyan, green, yellow,
    red ramp.
  - `FunscriptHeatmap.update` and `render_to_bitmap` produce raw RGBA bytes,
    bottom row first.
- `funscriptkit.util`
  - `parse_time` reads `HH:MM:SS[.mmm]` and raises `ValueError` on bad input.
    `format_time` writes the same form.
  - `format_bytes`, `clamp`, `map_range` and `lerp` are small value helpers.
  - The string helpers are `trim`, `ltrim`, `rtrim`, `contains_insensitive`,
    `string_equals_insensitive`, `string_starts_with` and `string_ends_with`.
- `funscriptkit.paths`
  - File helpers: `read_file`, `read_file_string`, `write_file`,
    `file_exists`, `directory_exists`, `create_directories`.
  - Path helpers: `path_from_string`, `filename`, `resource`, `pref_path`
    (a per-user data directory, through platformdirs) and `ffmpeg_path`.
  - `open_url` and `open_file_explorer` use the desktop's handler. On macOS
    they raise `NotImplementedError`.
  - `ColorCycler` hands out well-spread colours.
- `funscriptkit.filelog`
  - `FileLogger` buffers log lines with `[ t.ttt][LEVEL]: ` headers
    (`format_header`). A background thread writes them to a file when you call
    `flush()` and when you call `close()`. It also works as a context manager.
  - `LogLevel` holds the levels.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from funscriptkit.action import FunscriptAction
from funscriptkit.funscript import Funscript
from funscriptkit.util import format_time, parse_time

script = Funscript()
script.add_action(FunscriptAction(0.0, 0))
script.add_action(FunscriptAction(1.0, 100))
script.add_action(FunscriptAction(2.0, 0))

print(script.position_at_time(0.5))   # 50.0

script.select_all()
script.invert_selection()
print([a.pos for a in script.data.actions])  # [100, 0, 100]

print(format_time(3725.5, True))      # 01:02:05.500
print(parse_time("01:02:05.500"))     # 3725.5
```

Undo works through snapshots taken before each edit:

```python
from funscriptkit.undo import FunscriptUndoSystem

undo = FunscriptUndoSystem(script)
undo.snapshot(0, True)
script.remove_selected_actions()
undo.undo()        # the actions and selection are back
```

## What it does not do

- It has no command-line program, window or video player. It is a library only.
- It has no file-picker or message-box dialogs.
- `to_json` and `from_json` work on Python dicts. Reading and writing the JSON
  text or file is left to you, for example with the `json` module.
- Bookmarks and chapters in a script's metadata are neither read nor written.
- The heatmap is returned as raw RGBA bytes. Nothing is drawn on screen or
  saved as an image file.