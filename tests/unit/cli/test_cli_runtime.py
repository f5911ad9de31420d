import sys
import pytest
from datsheet.cli.runtime import run_cli
from datsheet.errors import ContainerError

# ---------------------------------------------------------------------
# Fake mains for exercising the wrapper
# ---------------------------------------------------------------------
def main_ok(argv=None) -> int:
    """simulates successful run of main"""
    return 0

def main_fail(argv=None) -> int:
    """simulates regular failure code of main"""
    return 5

def main_exception(argv=None) -> int:
    """simulates uncaught exception in main"""
    raise ValueError("kaputt")

def main_fatal(argv=None) -> int:
    """simulates a fatal conversion error"""
    raise ContainerError("No such file: pak.xlsx")

# ---------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------
def test_run_cli_ok(monkeypatch, capsys):
    """main() successful -> exit code 0, no error message"""
    monkeypatch.setattr(sys, "argv", ["prog"])
    with pytest.raises(SystemExit) as e:
        run_cli(main_ok)
    assert e.value.code == 0
    out, err = capsys.readouterr()
    assert out == ""
    assert err == ""


def test_run_cli_fail(monkeypatch, capsys):
    """main() returns 5 -> exit code 5"""
    monkeypatch.setattr(sys, "argv", ["prog"])
    with pytest.raises(SystemExit) as e:
        run_cli(main_fail)
    assert e.value.code == 5
    out, err = capsys.readouterr()
    assert "Error" not in err


def test_run_cli_exception_short(monkeypatch, capsys):
    """Exception without --debug or -vv -> short error message"""
    monkeypatch.setattr(sys, "argv", ["prog"])
    with pytest.raises(SystemExit) as e:
        run_cli(main_exception)
    assert e.value.code == 1
    out, err = capsys.readouterr()
    assert "Error: ValueError: kaputt" in err
    assert "Traceback" not in err


def test_run_cli_fatal_error_prints_code(monkeypatch, capsys):
    """conversion errors carry their code instead of the class name"""
    monkeypatch.setattr(sys, "argv", ["prog", "pak.xlsx"])
    with pytest.raises(SystemExit) as e:
        run_cli(main_fatal)
    assert e.value.code == 1
    out, err = capsys.readouterr()
    assert err.strip() == "Error: ZIP:No such file: pak.xlsx"


def test_run_cli_exception_debug(monkeypatch, capsys):
    """Exception with --debug -> full Traceback"""
    monkeypatch.setattr(sys, "argv", ["prog", "--debug"])
    with pytest.raises(SystemExit) as e:
        run_cli(main_exception)
    assert e.value.code == 1
    out, err = capsys.readouterr()
    assert "Traceback" in err
    assert "ValueError: kaputt" in err


def test_run_cli_exception_verbose(monkeypatch, capsys):
    """Exception with -vv -> full Traceback"""
    monkeypatch.setattr(sys, "argv", ["prog", "-vv"])
    with pytest.raises(SystemExit) as e:
        run_cli(main_exception)
    assert e.value.code == 1
    out, err = capsys.readouterr()
    assert "Traceback" in err
