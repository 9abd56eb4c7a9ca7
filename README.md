# nibilang

Pieces of the front end of a small lisp-like language: scoped environments,
error reports, collection of multi-line REPL input, tab completion of keyword
prefixes, and a self-contained terminal line editor with history. The package
uses only the standard library.

## Modules

- `nibilang.environment`: `Environment`, a scope chain. `get()`, `set()`,
  `drop()` and `get_env()` walk parent scopes; `set()` rebinds a name in the
  scope that already defines it and otherwise defines it locally; `drop()`
  returns whether anything was removed. Loaded modules are tracked with
  `indicate_loaded_module()` and `is_module_loaded()` (which also asks the
  parents), and `copy()` gives a new scope with the same bindings, modules
  and parent.
- `nibilang.errors`: `ErrorReport`, a frozen dataclass holding a `message` and
  an optional `locator`. `draw(markup=True, stream=None)` writes
  `ERROR: <message>` when there is no locator or markup is off; otherwise it
  writes the locator (rendered with `str`) followed by `Message: <message>`.
  Colour codes are added only when the stream is a terminal.
- `nibilang.replinput`: `InputBuffer.submit()` drops everything after a `#`,
  collects lines until the parentheses balance and then returns the whole
  statement; `ReplConfig` holds an optional `prelude` string.
- `nibilang.completion`: `complete(text)` returns the completions for an edit
  buffer that exactly matches a known prefix, such as `(im` → `(import "`.
- `nibilang.textwidth`: UTF-8 and display-width helpers working on byte
  offsets: `is_wide_char()`, `is_combining_char()`, `utf8_char_len()`,
  `prev_utf8_char_len()`, `utf8_to_code_point()`, `grapheme_len()`,
  `prev_grapheme_len()`, `ansi_escape_len()`, `column_pos()` and
  `column_pos_multiline()`.
- `nibilang.history`: `History`, a bounded line history (100 entries by
  default) that skips consecutive duplicates, evicts the oldest entry when
  full, and can be written with `save()` and read back with `load()`.
- `nibilang.lineedit`: `LineEditor`, the editing state (a UTF-8 byte buffer
  and a cursor) with `insert()`, `move_left()`, `move_right()`,
  `move_home()`, `move_end()`, `delete()`, `backspace()`,
  `delete_prev_word()`, `transpose()`, `kill_line()`, `kill_to_end()`,
  `history_step()` and `refresh()`, which writes the escape sequences that
  redraw the line in single- or multi-line mode. `Key` names the control
  codes the editor reacts to.
- `nibilang.terminal`: `is_unsupported_term()`, the `raw_mode(fd)` context
  manager, `get_columns()` and `readline()`.

## Examples

Collecting a statement that spans several lines:

```python
from nibilang.replinput import InputBuffer

buffer = InputBuffer()
assert buffer.submit("(set x  # a comment") is None
assert buffer.submit(" 42)") == "(set x   42)"
```

Tab completion:

```python
from nibilang.completion import complete

print(complete("(im"))   # ['(import "']
print(complete("(zz"))   # []
```

Scopes:

```python
from nibilang.environment import Environment

globals_ = Environment()
globals_.set("x", 1)
local = Environment(globals_)
local.set("x", 2)            # rebinds x in the parent scope
assert globals_.get("x") == 2
assert local.get_env("x") is globals_
assert local.drop("x") and local.get("x") is None
```

Driving the editor without a terminal, capturing what it would draw:

```python
from nibilang.lineedit import LineEditor

drawn = []
editor = LineEditor(prompt="> ", cols=80, output=drawn.append)
editor.insert("a")
editor.insert("b")
editor.move_left()
editor.insert("X")
assert editor.line == "aXb"
```

Reading lines at the terminal with history and completion:

```python
from nibilang.completion import complete
from nibilang.history import History
from nibilang.terminal import readline

history = History()
while True:
    try:
        line = readline("nibi> ", history, complete, multiline=True)
    except (EOFError, KeyboardInterrupt):
        break
    history.add(line)
    print(line)
```

`readline()` raises `EOFError` on Ctrl-D at an empty line (or end of input)
and `KeyboardInterrupt` on Ctrl-C. When stdin is not a terminal, or `TERM` is
`dumb`, `cons25` or `emacs`, it reads a plain line instead of editing. It does
not add the entered line to the history; the caller does that.

## What this package does not do

There is no language evaluator here, no value types for the language, and no
ready-made REPL loop or command-line program. The package provides the input
side (`readline()`, `InputBuffer`, `complete()`, `History`), scopes
(`Environment`) and error display (`ErrorReport`); evaluating the statements
is left to your own code, as in the loop above.