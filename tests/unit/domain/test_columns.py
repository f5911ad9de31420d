import pytest

from datsheet.domain.columns import (
    ColumnSet,
    cell_ref,
    column_index,
    column_letter,
    split_cell_ref,
)


# ---------------------------------------------------------------------
# Letter addresses
# ---------------------------------------------------------------------
@pytest.mark.parametrize(
    "index, letters",
    [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"),
     (701, "ZZ"), (702, "AAA"), (16383, "XFD")],
)
def test_column_letter_known_values(index, letters):
    assert column_letter(index) == letters
    assert column_index(letters) == index


def test_column_codec_round_trips_a_to_zz():
    """every index up to ZZ decodes back to itself, and letters are unique"""
    seen = set()
    for i in range(702):
        letters = column_letter(i)
        assert column_index(letters) == i
        seen.add(letters)
    assert len(seen) == 702


def test_column_index_is_case_insensitive():
    assert column_index("ab") == 27


@pytest.mark.parametrize("bad", ["", "A1", "Ä", "-"])
def test_column_index_rejects_garbage(bad):
    with pytest.raises(ValueError):
        column_index(bad)


def test_column_letter_rejects_negative():
    with pytest.raises(ValueError):
        column_letter(-1)


def test_cell_refs():
    assert cell_ref(27, 12) == "AB12"
    assert split_cell_ref("AB12") == (27, 12)
    assert split_cell_ref("a1") == (0, 1)
    with pytest.raises(ValueError):
        split_cell_ref("12")


# ---------------------------------------------------------------------
# Key -> column assignment
# ---------------------------------------------------------------------
def test_column_set_is_seeded_with_name_and_filename():
    cols = ColumnSet()
    assert cols.keys == ["name", "filename"]
    assert cols.assign("obj") == 2
    assert cols.assign("Name") == 0


def test_column_set_first_seen_order_and_case_merge():
    cols = ColumnSet()
    for key in ["speed", "Power", "SPEED", "#", "power"]:
        cols.assign(key)
    assert cols.keys == ["name", "filename", "speed", "power", "#"]
    assert list(cols)[-1] == (4, "#")
    assert "Speed" in cols
    assert cols.index_of("POWER") == 3
