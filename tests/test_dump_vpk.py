import sys

import dump_vpk


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["dump_vpk.py", *args])
    return dump_vpk.main()


def test_list_entries(vpk_on_disk, vpk_file, monkeypatch, capsys):
    path = vpk_on_disk([
        vpk_file("scripts/items.txt", preload=b"items"),
        vpk_file("materials/wall.vmt", content=b"vmt", archive_index=3),
    ])
    assert run(monkeypatch, path, "--ext", "txt") == 0
    out = capsys.readouterr().out
    assert "Version: 1" in out
    assert "scripts/items.txt" in out
    assert "materials/wall.vmt" not in out
    assert "1 entries" in out


def test_check_file(vpk_on_disk, vpk_file, monkeypatch, capsys):
    path = vpk_on_disk(
        [vpk_file("sound/a.wav", content=b"RIFF", archive_index=0)],
        archives={0: b"RIFF"},
    )
    assert run(monkeypatch, path, "--check", "sound/a.wav", "--validate") == 0
    assert "sound/a.wav: 4 bytes (CRC ok)" in capsys.readouterr().out


def test_check_missing_entry(vpk_on_disk, vpk_file, monkeypatch, capsys):
    path = vpk_on_disk([vpk_file("a/b.txt")])
    assert run(monkeypatch, path, "--check", "a/missing.txt") == 1
    assert "Error:" in capsys.readouterr().out


def test_missing_vpk(tmp_path, monkeypatch, capsys):
    assert run(monkeypatch, str(tmp_path / "nope_dir.vpk")) == 1
    assert "File not found" in capsys.readouterr().out
