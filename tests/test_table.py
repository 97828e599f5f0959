import pytest

from fuqdb.table import SortRule, SubTable, Table, TableLoadError, load_csv


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8", newline="")
    return path


def _numbers(table, column=0):
    return [int(row[column]) for row in table.rows[1:]]


def test_load_csv_reads_header_and_rows(tmp_path):
    path = _write(tmp_path, "people.csv", "name,age\nbob,3\nann,7\n")
    table = load_csv(path)
    assert table.rows == [["name", "age"], ["bob", "3"], ["ann", "7"]]
    assert table.columns == ["name", "age"]


def test_load_csv_escapes_and_trailing_comma(tmp_path):
    path = _write(tmp_path, "esc.csv", "a\\,b,c\\\\d,\n")
    table = load_csv(path)
    assert table.rows == [["a,b", "c\\d"]]


def test_load_csv_empty_file_gives_no_rows(tmp_path):
    path = _write(tmp_path, "empty.csv", "")
    assert load_csv(path).rows == []


def test_load_csv_column_mismatch_keeps_earlier_rows(tmp_path):
    path = _write(tmp_path, "bad.csv", "a,b\n1,2\n3\n4,5\n")
    with pytest.raises(TableLoadError) as info:
        load_csv(path)
    assert info.value.partial.rows == [["a", "b"], ["1", "2"]]
    assert "line 3" in str(info.value)


def test_load_csv_dangling_escape(tmp_path):
    path = _write(tmp_path, "dangling.csv", "a,b\\\n")
    with pytest.raises(TableLoadError) as info:
        load_csv(path)
    assert "escape" in str(info.value)


def test_load_csv_rejects_other_extensions(tmp_path):
    path = _write(tmp_path, "data.txt", "a,b\n")
    with pytest.raises(TableLoadError) as info:
        load_csv(path)
    assert info.value.partial is None
    assert "File extension not supported" in str(info.value)


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(TableLoadError) as info:
        load_csv(tmp_path / "absent.csv")
    assert "Cannot open file" in str(info.value)


def test_save_and_load_round_trip(tmp_path):
    table = Table(["id", "name"])
    table.insert(["1", "x"], False)
    table.insert(["2", "y"], False)
    path = tmp_path / "out.csv"
    table.save(path)
    assert load_csv(path).rows == table.rows


def test_get_col_index():
    table = Table(["a", "b", "c"])
    assert table.get_col_index("c") == 2
    with pytest.raises(KeyError):
        table.get_col_index("z")


def test_set_changes_only_data_rows():
    table = Table(["a", "b"])
    table.insert(["1", "2"], False)
    table.insert(["3", "4"], False)
    table.set("b", "v")
    assert table.rows == [["a", "b"], ["1", "v"], ["3", "v"]]


def test_set_unknown_column_uses_first():
    table = Table(["a", "b"])
    table.insert(["1", "2"], False)
    table.set("missing", "v")
    assert table.rows[1] == ["v", "2"]


def test_default_sort_rule():
    table = Table(["a"])
    assert table.sort_rule == SortRule(ascending=True, column_index=0)


@pytest.mark.parametrize("ascending", [True, False])
def test_sort_orders_numbers(ascending):
    table = Table(["n"])
    for value in ["10", "2", "33", "4", "2"]:
        table.insert([value], False)
    table.sort_rule = SortRule(ascending=ascending, column_index=0)
    table.sort()
    assert table.rows[0] == ["n"]
    assert _numbers(table) == sorted(_numbers(table), reverse=not ascending)
    assert len(table.rows) == 6


def test_insert_sorted_ascending_keeps_order():
    table = Table(["n"])
    for value in ["5", "3", "8", "1", "9", "2", "7", "4", "6"]:
        table.insert([value], True)
    assert _numbers(table) == sorted(_numbers(table))
    assert len(table.rows) == 10


def test_insert_sorted_descending_keeps_order():
    table = Table(["n"])
    table.sort_rule = SortRule(ascending=False, column_index=0)
    for value in ["5", "3", "8", "1"]:
        table.insert([value], True)
    assert _numbers(table) == sorted(_numbers(table), reverse=True)


def test_insert_without_sort_appends():
    table = Table(["n"])
    for value in ["5", "3", "8"]:
        table.insert([value], False)
    assert table.rows[1:] == [["5"], ["3"], ["8"]]


def test_colinsert_and_colerase():
    table = Table(["a", "b"])
    table.insert(["1", "2"], False)
    table.colinsert("c")
    assert table.rows == [["a", "b", "c"], ["1", "2", ""]]
    table.colerase("a")
    assert table.rows == [["b", "c"], ["2", ""]]
    with pytest.raises(KeyError):
        table.colerase("a")


def test_render_box_shape():
    table = Table(["name", "age"])
    table.insert(["bob", "3"], False)
    lines = table.render().splitlines()
    assert lines[0].startswith("┌─") and lines[0].endswith("─┐")
    assert lines[-1].startswith("└─") and lines[-1].endswith("─┘")
    assert len(lines) == 2 * len(table.rows) + 1
    assert lines[2].startswith("├─")
    assert "bob" in lines[3] and "name" in lines[1]


def test_render_truncates_long_values():
    long_value = "x" * 200
    table = Table(["a", "b"])
    table.insert([long_value, "y"], False)
    out = table.render()
    assert long_value not in out
    assert "..." in out


def test_subtable_render_shows_selected_rows():
    table = Table(["n"])
    for value in ["alpha", "beta", "gamma"]:
        table.insert([value], False)
    view = SubTable(table, [2])
    out = view.render()
    assert "beta" in out
    assert "alpha" not in out and "gamma" not in out
    assert len(out.splitlines()) == 3


def test_subtable_save_writes_header_and_selection(tmp_path):
    table = Table(["n", "m"])
    for value in ["1", "2", "3"]:
        table.insert([value, value], False)
    path = tmp_path / "view.csv"
    SubTable(table, [3, 1]).save(path)
    assert load_csv(path).rows == [["n", "m"], ["3", "3"], ["1", "1"]]


def test_subtable_sort_follows_target_rule():
    table = Table(["n"])
    for value in ["30", "10", "20", "5"]:
        table.insert([value], False)
    view = SubTable(table, [1, 2, 3])
    view.sort()
    values = [int(table.rows[i][0]) for i in view.rows]
    assert values == sorted(values)
    assert sorted(view.rows) == [1, 2, 3]
    table.sort_rule = SortRule(ascending=False, column_index=0)
    view.sort()
    values = [int(table.rows[i][0]) for i in view.rows]
    assert values == sorted(values, reverse=True)