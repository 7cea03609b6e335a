import json

import pyperclip
import pytest
from flask import Flask

from authinator import cli, config
from authinator.core import base32, otp_core

ACME_SECRET = "JBSWY3DPEHPK3PXP"
ACME_KEY = base32.decode(ACME_SECRET)


@pytest.fixture
def run(data_file):
    def run(*argv):
        return cli.main([*argv, "--data-file", str(data_file)])

    return run


@pytest.fixture
def copied(monkeypatch):
    calls = []
    monkeypatch.setattr(pyperclip, "copy", calls.append)
    return calls


def test_no_arguments_prints_guide(capsys):
    assert cli.main([]) == 0
    out = capsys.readouterr().out
    assert "usage: authinator" in out
    assert "authinator create github JBSWY3DPEHPK3PXP" in out


def test_help_command(capsys):
    assert cli.main(["help"]) == 0
    assert "GET    /totps" in capsys.readouterr().out


def test_create_and_list(run, capsys, frozen_time):
    assert run("create", "acme", ACME_SECRET) == 0
    assert "Entry created successfully!" in capsys.readouterr().out

    frozen_time(59)
    assert run("list") == 0
    out = capsys.readouterr().out
    assert "Stored TOTP entries:" in out
    assert f" - acme: {otp_core.hotp(ACME_KEY, 1)} (expires in 1 seconds)" in out


def test_list_empty(run, capsys):
    assert run("list") == 0
    assert "No entries found." in capsys.readouterr().out


def test_list_skips_undecodable_entries(run, capsys):
    run("create", "broken", "not base32!")
    run("create", "acme", ACME_SECRET)
    capsys.readouterr()

    assert run("list") == 0
    out = capsys.readouterr().out
    assert "[!] Error generating TOTP code for broken" in out
    assert " - acme: " in out


def test_create_duplicate(run, capsys, data_file):
    run("create", "acme", ACME_SECRET)
    assert run("create", "acme", "GEZDGNBVGY3TQOJQ") == 1
    assert "already exists" in capsys.readouterr().out
    assert json.loads(data_file.read_text())["entries"] == [{"name": "acme", "secret": ACME_SECRET}]


def test_create_interactive(run, monkeypatch, data_file):
    answers = iter(["  acme ", " JBSWY3DPEHPK3PXP\n"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    assert run("create") == 0
    assert json.loads(data_file.read_text())["entries"] == [{"name": "acme", "secret": ACME_SECRET}]


def test_create_interactive_prompts_only_for_missing_secret(run, monkeypatch, data_file):
    monkeypatch.setattr("builtins.input", lambda prompt="": ACME_SECRET)
    assert run("create", "acme") == 0
    assert json.loads(data_file.read_text())["entries"][0]["name"] == "acme"


def test_create_interactive_empty_answer(run, monkeypatch, capsys, data_file):
    monkeypatch.setattr("builtins.input", lambda prompt="": "")
    assert run("create") == 1
    assert "required" in capsys.readouterr().out
    assert not data_file.exists()


def test_code_command(run, capsys, copied, frozen_time):
    run("create", "acme", ACME_SECRET)
    capsys.readouterr()
    frozen_time(59)

    assert run("code", "acme") == 0
    out = capsys.readouterr().out
    current = otp_core.hotp(ACME_KEY, 1)
    assert f"Your current TOTP code is: {current} (Time remaining: 1 seconds)" in out
    assert f"After this, your next TOTP code will be: {otp_core.hotp(ACME_KEY, 2)}" in out
    assert "Current code copied to clipboard." in out
    assert copied == [current]


def test_bare_name_is_a_code_lookup(run, capsys, copied, frozen_time):
    run("create", "acme", ACME_SECRET)
    frozen_time(31)
    assert run("acme") == 0
    assert "(Time remaining: 29 seconds)" in capsys.readouterr().out
    assert copied == [otp_core.hotp(ACME_KEY, 1)]


def test_code_no_copy(run, capsys, copied):
    run("create", "acme", ACME_SECRET)
    assert run("code", "acme", "--no-copy") == 0
    assert copied == []
    assert "copied" not in capsys.readouterr().out


def test_code_clipboard_unavailable(run, capsys, monkeypatch):
    def no_clipboard(text):
        raise pyperclip.PyperclipException("no copy mechanism")

    monkeypatch.setattr(pyperclip, "copy", no_clipboard)
    run("create", "acme", ACME_SECRET)
    capsys.readouterr()

    assert run("acme") == 0
    out = capsys.readouterr().out
    assert "Your current TOTP code is:" in out
    assert "copied" not in out


def test_code_not_found(run, capsys):
    assert run("nobody") == 1
    assert "No entry found with that name." in capsys.readouterr().out


def test_code_undecodable_secret(run, capsys, copied):
    run("create", "broken", "not base32!")
    assert run("broken") == 1
    assert "[!] Error generating TOTP code" in capsys.readouterr().out
    assert copied == []


def test_remove(run, capsys, data_file):
    run("create", "a", ACME_SECRET)
    run("create", "b", ACME_SECRET)
    assert run("remove", "a") == 0
    assert "Entry 'a' has been removed." in capsys.readouterr().out
    assert [e["name"] for e in json.loads(data_file.read_text())["entries"]] == ["b"]


def test_remove_missing(run, capsys):
    assert run("remove", "zzz") == 1
    assert "No entry found with the name: zzz" in capsys.readouterr().out


def test_storage_error_is_reported(run, capsys, data_file):
    data_file.write_text("{not json")
    assert run("list") == 1
    assert capsys.readouterr().out.startswith("[!] Error reading data file")


def test_data_file_from_environment(monkeypatch, tmp_path):
    path = tmp_path / "env.json"
    monkeypatch.setenv(config.DATA_FILE_ENV, str(path))
    assert cli.main(["create", "acme", ACME_SECRET]) == 0
    assert path.exists()


def test_serve(monkeypatch, data_file, capsys):
    calls = []
    monkeypatch.setattr(Flask, "run", lambda self, **kw: calls.append((self, kw)))

    assert cli.main(["serve", "--port", "9000", "--data-file", str(data_file)]) == 0
    app, kwargs = calls[0]
    assert kwargs == {"host": "0.0.0.0", "port": 9000, "threaded": True}
    assert app.config["DATA_FILE"] == str(data_file)
    assert "Serving on http://0.0.0.0:9000" in capsys.readouterr().out


def test_serve_invalid_port_env(monkeypatch, capsys):
    monkeypatch.setenv(config.PORT_ENV, "eighty")
    monkeypatch.setattr(Flask, "run", lambda self, **kw: None)
    assert cli.main(["serve"]) == 1
    assert "AUTHINATOR_PORT must be an integer" in capsys.readouterr().out


def test_config_precedence(monkeypatch):
    monkeypatch.delenv(config.HOST_ENV, raising=False)
    monkeypatch.delenv(config.PORT_ENV, raising=False)
    monkeypatch.delenv(config.DATA_FILE_ENV, raising=False)
    assert config.host() == "0.0.0.0"
    assert config.port() == 8055
    assert config.data_file() == "totp.json"

    monkeypatch.setenv(config.HOST_ENV, "127.0.0.1")
    monkeypatch.setenv(config.PORT_ENV, "8080")
    assert config.host() == "127.0.0.1"
    assert config.port() == 8080
    assert config.host("localhost") == "localhost"
    assert config.port(1234) == 1234


def test_create_interactive_closed_stdin(run, monkeypatch, capsys, data_file):
    def closed(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", closed)
    assert run("create") == 1
    assert "[!] Both a name and a secret are required." in capsys.readouterr().out
    assert not data_file.exists()


def test_create_stdin_closed_before_secret(run, monkeypatch, capsys, data_file):
    answers = iter(["acme"])

    def answer(prompt=""):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", answer)
    assert run("create") == 1
    assert "required" in capsys.readouterr().out
    assert not data_file.exists()
