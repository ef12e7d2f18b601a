"""Tests for the mib_to_json tool."""

import json
from pathlib import Path

import pytest

from mibkit.parser import MibParser
from tools.mib_to_json import extract_mib_info, main


@pytest.fixture
def mib_file(tmp_path: Path, sample_mib: str) -> Path:
    path = tmp_path / "ACME-MIB.txt"
    path.write_text(sample_mib)
    return path


def test_extract_mib_info_flat(sample_mib: str) -> None:
    info = extract_mib_info(MibParser().parse(sample_mib))
    assert info["module"] == "ACME-MIB"
    assert info["imports"]["SNMPv2-TC"] == ["DisplayString"]
    status = next(o for o in info["objects"] if o["name"] == "acmeStatus")
    assert status["oid"] == "1.3.6.1.4.1.55108.1.2"
    assert status["enum_values"] == {"1": "up", "2": "down", "3": "testing"}
    assert info["diagnostics"] == []


def test_extract_mib_info_tree(sample_mib: str) -> None:
    info = extract_mib_info(MibParser().parse(sample_mib), tree=True)
    assert info["name"] == "ACME-MIB"
    assert info["nodes"][0]["name"] == "iso"


def test_main_writes_json(mib_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output = tmp_path / "out" / "acme.json"
    assert main([str(mib_file), "--output", str(output)]) == 0
    data = json.loads(output.read_text())
    assert [o["name"] for o in data["objects"]][:2] == ["acmeMIB", "acmeObjects"]
    assert "8 objects from ACME-MIB written to" in capsys.readouterr().out


def test_main_tree_output(mib_file: Path, tmp_path: Path) -> None:
    output = tmp_path / "tree.json"
    assert main([str(mib_file), "--tree", "--output", str(output)]) == 0
    assert json.loads(output.read_text())["name"] == "ACME-MIB"


def test_main_default_output_path(mib_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert main([str(mib_file)]) == 0
    assert (tmp_path / "mib-json" / "ACME-MIB.json").exists()


def test_main_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([str(tmp_path / "nope.txt")]) == 1
    assert "not found" in capsys.readouterr().out


def test_main_parse_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "BAD.txt"
    path.write_text("orphan OBJECT IDENTIFIER ::= { iso 1 }\n")
    assert main([str(path), "--output", str(tmp_path / "bad.json")]) == 1
    assert "ERROR" in capsys.readouterr().out
    assert not (tmp_path / "bad.json").exists()


def test_main_reports_diagnostics(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "PART.txt"
    path.write_text("PART-MIB DEFINITIONS ::= BEGIN\nx OBJECT IDENTIFIER ::= { y 1 }\nEND\n")
    assert main([str(path), "--output", str(tmp_path / "part.json")]) == 0
    assert "1 definitions could not be resolved" in capsys.readouterr().out


def test_main_with_mib_dir_loads_imports(tmp_path: Path) -> None:
    mibs = tmp_path / "mibs"
    mibs.mkdir()
    (mibs / "BASE-MIB").write_text("BASE-MIB DEFINITIONS ::= BEGIN\nbaseNode OBJECT IDENTIFIER ::= { enterprises 77 }\nEND\n")
    path = tmp_path / "CHILD-MIB.txt"
    path.write_text(
        "CHILD-MIB DEFINITIONS ::= BEGIN\nIMPORTS baseNode FROM BASE-MIB;\n"
        "childNode OBJECT IDENTIFIER ::= { baseNode 1 }\nEND\n"
    )
    output = tmp_path / "child.json"
    assert main([str(path), "--mib-dir", str(mibs), "--output", str(output)]) == 0
    objects = json.loads(output.read_text())["objects"]
    assert len(objects) == 1
    assert objects[0]["oid"] == "1.3.6.1.4.1.77.1"


def test_main_with_config(mib_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = tmp_path / "cfg.yaml"
    config.write_text(
        f"logger:\n  level: INFO\n  log_dir: {tmp_path / 'logs'}\n  console: false\n"
        "mib_dirs: []\nparser:\n  seed_well_known: true\n"
    )
    monkeypatch.setattr("mibkit.app_config.sys.platform", "sunos5")
    output = tmp_path / "cfg.json"
    assert main([str(mib_file), "--config", str(config), "--output", str(output)]) == 0
    assert (tmp_path / "logs" / "mibkit.log").exists()
