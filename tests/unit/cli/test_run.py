import pytest

from datsheet import __version__
from datsheet.cli.apps.run import build_arg_parser, main


# ---------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------
def test_help_exits_zero(capsys):
    with pytest.raises(SystemExit) as e:
        main(["--help"])
    assert e.value.code == 0
    out, _ = capsys.readouterr()
    assert "--import" in out
    assert "XLSX" in out


def test_version_exits_zero(capsys):
    with pytest.raises(SystemExit) as e:
        main(["-V"])
    assert e.value.code == 0
    out, _ = capsys.readouterr()
    assert f"datSheet {__version__}" in out


def test_no_paths_is_usage_error(capsys):
    with pytest.raises(SystemExit) as e:
        main([])
    assert e.value.code == 2
    _, err = capsys.readouterr()
    assert "NFN:No file specified!" in err


def test_import_needs_dir_and_workbook(capsys):
    with pytest.raises(SystemExit) as e:
        main(["-i", "only-one"])
    assert e.value.code == 2


def test_parser_defaults():
    args = build_arg_parser().parse_args(["a.xlsx", "b.xlsx", "-vv"])
    assert args.paths == ["a.xlsx", "b.xlsx"]
    assert args.output == "."
    assert args.pack is False
    assert args.verbose == 2


# ---------------------------------------------------------------------
# Pack / unpack
# ---------------------------------------------------------------------
def test_pack_then_unpack(tmp_path, capsys):
    src = tmp_path / "src"
    (src / "road").mkdir(parents=True)
    (src / "road" / "bus.dat").write_text("obj=vehicle\nname=bus\nspeed=80\n", encoding="utf-8")
    book = tmp_path / "pak.xlsx"

    assert main(["-i", str(src), str(book)]) == 0
    assert book.exists()
    out, _ = capsys.readouterr()
    assert "Finished without errors." in out

    dest = tmp_path / "dest"
    assert main([str(book), "-o", str(dest)]) == 0
    out, _ = capsys.readouterr()
    assert "Finished without errors." in out
    assert (dest / "road" / "bus.dat").read_text(encoding="utf-8") == "name=bus\nobj=vehicle\nspeed=80\n"


def test_warnings_are_counted(tmp_path, capsys):
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.dat").write_text("name=a\nname=b\nspeed=\n", encoding="utf-8")

    assert main(["-i", str(src), str(tmp_path / "pak.xlsx")]) == 0
    out, _ = capsys.readouterr()
    assert "Finished with 2 warning(s)." in out


def test_config_file_is_applied(tmp_path, capsys):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("extension: .txt\n", encoding="utf-8")
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.txt").write_text("name=a\n", encoding="utf-8")
    book = tmp_path / "pak.xlsx"

    assert main(["--config", str(cfg), "-i", str(src), str(book)]) == 0
    assert main(["--config", str(cfg), str(book), "-o", str(tmp_path / "out")]) == 0
    assert (tmp_path / "out" / "a.txt").read_text(encoding="utf-8") == "name=a\n"
