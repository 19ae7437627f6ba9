from __future__ import annotations

import json

from binaural.au_format import AuHeader, read_container
from binaural.main import main


def _run(tmp_path, *argv):
    return main(["--env", str(tmp_path / "missing.env"), *argv])


def test_make_reference_run(tmp_path, capsys):
    out = tmp_path / "test.au"
    rc = _run(
        tmp_path,
        "--json",
        "make",
        "--carrier", "2112",
        "--beat", "2:10",
        "--sample-rate", "1000",
        "--legacy-amplitude",
        "--out", str(out),
    )
    assert rc == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["file_size"] == 40024
    assert payload["data_size"] == 40000
    assert payload["channels"] == 2
    assert out.stat().st_size == 40024


def test_make_single_pass_with_preset_and_env(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("BINAURAL_SAMPLE_RATE", "100")
    out = tmp_path / "p.au"
    rc = _run(tmp_path, "make", "--preset", "default", "--single-pass", "--out", str(out))
    assert rc == 0
    header, _ = read_container(out)
    assert header.sample_rate == 100
    assert header.frames == 8000
    assert str(out) in capsys.readouterr().out


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    env = tmp_path / ".env"
    env.write_text("BINAURAL_SAMPLE_RATE=200\n")
    # load_dotenv writes os.environ; register the key so teardown removes it
    monkeypatch.setenv("BINAURAL_SAMPLE_RATE", "0")
    monkeypatch.delenv("BINAURAL_SAMPLE_RATE")
    out = tmp_path / "e.au"
    rc = main(["--env", str(env), "make", "--carrier", "50", "--beat", "4:1", "--out", str(out)])
    assert rc == 0
    assert read_container(out)[0].sample_rate == 200


def test_make_requires_beats(tmp_path, capsys):
    rc = _run(tmp_path, "make", "--carrier", "200", "--out", str(tmp_path / "x.au"))
    assert rc == 2
    assert "--beat" in capsys.readouterr().err


def test_make_bad_beat_syntax(tmp_path):
    assert _run(tmp_path, "make", "--carrier", "200", "--beat", "2x10", "--out", str(tmp_path / "x.au")) == 2


def test_combine_mismatch_exit_code(tmp_path, capsys):
    left = tmp_path / "l.au"
    right = tmp_path / "r.au"
    left.write_bytes(AuHeader.for_samples(2, 8000, 1).pack() + b"\x00" * 4)
    right.write_bytes(AuHeader.for_samples(1, 8000, 1).pack() + b"\x00" * 2)
    rc = _run(tmp_path, "combine", "--left", str(left), "--right", str(right), "--out", str(tmp_path / "o.au"))
    assert rc == 4
    err = capsys.readouterr().err
    assert "combine failed" in err
    assert not (tmp_path / "o.au").exists()


def test_combine_missing_input(tmp_path):
    right = tmp_path / "r.au"
    right.write_bytes(AuHeader.for_samples(1, 8000, 1).pack() + b"\x00" * 2)
    rc = _run(tmp_path, "combine", "--left", str(tmp_path / "nope.au"), "--right", str(right), "--out", str(tmp_path / "o.au"))
    assert rc == 3


def test_info(tmp_path, capsys):
    p = tmp_path / "i.au"
    p.write_bytes(AuHeader.for_samples(4, 8000, 2).pack() + b"\x00" * 16)
    assert _run(tmp_path, "--json", "info", str(p)) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["channels"] == 2
    assert payload["data_size"] == 16
    assert payload["encoding"] == 3

    assert _run(tmp_path, "info", str(p)) == 0
    assert "sample_rate" in capsys.readouterr().out


def test_info_malformed(tmp_path):
    p = tmp_path / "bad.au"
    p.write_bytes(b"RIFF0000")
    assert _run(tmp_path, "info", str(p)) == 4


def test_presets(tmp_path, capsys):
    assert _run(tmp_path, "--json", "presets") == 0
    names = [row["name"] for row in json.loads(capsys.readouterr().out)]
    assert "default" in names


def test_bad_env_config(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("BINAURAL_VOLUME", "3")
    assert _run(tmp_path, "presets") == 2
    assert "config" in capsys.readouterr().err


def test_unusable_log_dir_is_a_config_error(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    rc = _run(tmp_path, "--log-dir", str(blocker / "logs"), "presets")
    assert rc == 5
    assert "config:" in capsys.readouterr().err
