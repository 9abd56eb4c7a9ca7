import pytest

from nibilang.history import DEFAULT_MAX_LEN, History


def test_default_capacity_is_one_hundred():
    assert History().max_len == DEFAULT_MAX_LEN == 100


def test_add_stores_lines_in_order():
    history = History()
    assert history.add("(+ 1 2)")
    assert history.add("(exit 0)")
    assert list(history) == ["(+ 1 2)", "(exit 0)"]
    assert len(history) == 2


def test_consecutive_duplicate_is_refused():
    history = History()
    assert history.add("a")
    assert not history.add("a")
    assert list(history) == ["a"]


def test_non_consecutive_duplicate_is_stored():
    history = History()
    for line in ("a", "b", "a"):
        history.add(line)
    assert list(history) == ["a", "b", "a"]


def test_oldest_entry_is_evicted_at_capacity():
    history = History(max_len=3)
    for line in ("a", "b", "c", "d"):
        assert history.add(line)
    assert list(history) == ["b", "c", "d"]
    assert len(history) == history.max_len


def test_zero_capacity_disables_history():
    history = History(max_len=0)
    assert not history.add("a")
    assert len(history) == 0


def test_set_max_len_rejects_values_below_one():
    history = History(max_len=5)
    assert not history.set_max_len(0)
    assert not history.set_max_len(-3)
    assert history.max_len == 5


def test_set_max_len_truncates_keeping_first_entries():
    history = History()
    for line in ("a", "b", "c", "d"):
        history.add(line)
    assert history.set_max_len(2)
    assert history.max_len == 2
    assert list(history) == ["a", "b"]


def test_set_max_len_larger_keeps_everything():
    history = History(max_len=2)
    history.add("a")
    history.add("b")
    assert history.set_max_len(10)
    assert list(history) == ["a", "b"]
    history.add("c")
    assert list(history) == ["a", "b", "c"]


def test_indexing_pop_and_assignment():
    history = History()
    history.add("first")
    history.add("")
    history[-1] = "edited"
    assert history[-1] == "edited"
    assert history.pop() == "edited"
    assert list(history) == ["first"]


def test_empty_history_is_falsy():
    history = History()
    assert not history
    history.add("x")
    assert history


def test_save_writes_one_entry_per_line(tmp_path):
    history = History()
    history.add("(set a 1)")
    history.add("(exit 0)")
    path = tmp_path / "history.txt"
    history.save(path)
    assert path.read_text(encoding="utf-8") == "(set a 1)\n(exit 0)\n"


def test_save_then_load_round_trip(tmp_path):
    original = History()
    for line in ("(import \"std\")", "", "(+ 1 2)", "λ"):
        original.add(line)
    path = tmp_path / "history.txt"
    original.save(path)

    restored = History()
    assert restored.load(path)
    assert list(restored) == list(original)


def test_load_missing_file_returns_false(tmp_path):
    history = History()
    assert not history.load(tmp_path / "absent.txt")
    assert len(history) == 0


def test_load_skips_consecutive_duplicates_and_respects_capacity(tmp_path):
    path = tmp_path / "history.txt"
    path.write_text("a\na\nb\nc\nd", encoding="utf-8")
    history = History(max_len=2)
    assert history.load(path)
    assert list(history) == ["c", "d"]


def test_save_to_unwritable_path_raises(tmp_path):
    history = History()
    history.add("a")
    with pytest.raises(OSError):
        history.save(tmp_path / "missing_dir" / "history.txt")