from pathlib import Path, PurePath

import pytest

from datsheet.config import ConvertConfig
from datsheet.domain.tree import TreeMapper
from datsheet.errors import TreeError
from datsheet.issues import IssueLog


def _touch(path: Path, text: str = "name=x\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------
def test_sheet_names():
    m = TreeMapper()
    assert m.sheet_name(PurePath(".")) == ";"
    assert m.sheet_name(PurePath("vehicles")) == "vehicles"
    assert m.sheet_name(PurePath("vehicles/road/bus")) == "vehicles;road;bus"


def test_directory_is_inverse_of_sheet_name(tmp_path):
    m = TreeMapper()
    for rel in ["vehicles", "vehicles/road/bus"]:
        assert m.directory(m.sheet_name(PurePath(rel)), tmp_path) == tmp_path / rel
    assert m.directory(";", tmp_path) == tmp_path


@pytest.mark.parametrize("bad", ["a;;b", ";a", "a;..;b", ".", "a/b"])
def test_directory_rejects_names_escaping_the_root(tmp_path, bad):
    with pytest.raises(ValueError):
        TreeMapper().directory(bad, tmp_path)


def test_custom_join_char():
    m = TreeMapper(ConvertConfig(join_char="+", root_sheet="+"))
    assert m.sheet_name(PurePath("a/b")) == "a+b"
    assert m.sheet_name(PurePath("")) == "+"


# ---------------------------------------------------------------------
# Walk
# ---------------------------------------------------------------------
def test_walk_is_sorted_pre_order_and_skips_empty_dirs(tmp_path):
    _touch(tmp_path / "z.dat")
    _touch(tmp_path / "b" / "two.dat")
    _touch(tmp_path / "b" / "one.dat")
    _touch(tmp_path / "a" / "deep" / "x.dat")
    _touch(tmp_path / "b" / "notes.txt")
    (tmp_path / "empty").mkdir()

    sources = list(TreeMapper().walk(tmp_path, IssueLog()))
    assert [s.name for s in sources] == [";", "a;deep", "b"]
    assert [f.name for f in sources[2].files] == ["one.dat", "two.dat"]


def test_root_without_files_has_no_sheet(tmp_path):
    _touch(tmp_path / "pak" / "x.dat")
    assert [s.name for s in TreeMapper().walk(tmp_path)] == ["pak"]


def test_directory_with_join_char_is_skipped_with_sn1(tmp_path):
    _touch(tmp_path / "a;b" / "x.dat")
    _touch(tmp_path / "a;b" / "c" / "y.dat")
    _touch(tmp_path / "ok" / "z.dat")
    issues = IssueLog()
    sources = list(TreeMapper().walk(tmp_path, issues))
    # sub-directories are still visited but inherit the unmappable segment
    assert issues.codes() == ["SN1", "SN1"]
    assert [s.name for s in sources] == ["ok"]


def test_long_sheet_name_warns_sn0_but_is_kept(tmp_path):
    rel = "a" * 20 + "/" + "b" * 20
    _touch(tmp_path / rel / "x.dat")
    issues = IssueLog()
    sources = list(TreeMapper().walk(tmp_path, issues))
    assert [s.name for s in sources] == ["a" * 20 + ";" + "b" * 20]
    assert issues.codes() == ["SN0"]


def test_walk_of_missing_root_is_fatal(tmp_path):
    with pytest.raises(TreeError) as e:
        list(TreeMapper().walk(tmp_path / "nope"))
    assert str(e.value).startswith("URD:")
