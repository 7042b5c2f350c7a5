from tgptbot import NAME
from tgptbot import cli


def test_version(capsys, monkeypatch):
    def _fail(*_a, **_kw):
        raise AssertionError("config must not be read")

    monkeypatch.setattr(cli, "load", _fail)

    assert cli.main(["-version"]) == 0
    out = capsys.readouterr().out
    assert out.startswith(f"{NAME}: ")
    assert "-config" in out


def test_missing_config(tmp_path):
    assert cli.main(["-config", str(tmp_path / "missing.json")]) == 1


def test_bad_config(write_config):
    assert cli.main(["-config", write_config(debug_level="loud")]) == 1


def test_unexpected_error_is_logged(config_file, monkeypatch, caplog):
    def _boom(_settings):
        raise KeyError("boom")

    monkeypatch.setattr(cli, "run", _boom)

    assert cli.main(["--config", config_file]) == 1
    assert "abnormal termination" in caplog.text
