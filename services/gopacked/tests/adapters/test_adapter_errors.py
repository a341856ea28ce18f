from gopacked.adapters.errors import CommandNotFound, FetchError
from gopacked.adapters.process.subprocess_runner import SubprocessRunner
from gopacked.adapters.prompt.typer_prompt import TyperConfirm

import pytest


def test_adapter_error_has_message_and_details():
    err = FetchError("boom", details={"url": "http://x"})
    assert "boom" in str(err)
    assert err.details["url"] == "http://x"


def test_adapter_error_str_includes_cause():
    err = FetchError("Failed to fetch", cause=OSError("refused"))
    assert str(err) == "Failed to fetch: refused"


def test_runner_reports_missing_executable(monkeypatch):
    monkeypatch.setattr("shutil.which", lambda name: None)
    with pytest.raises(CommandNotFound) as excinfo:
        SubprocessRunner().run(["java", "-version"])
    assert excinfo.value.hint


def test_assume_yes_confirms_without_asking(capsys):
    assert TyperConfirm(assume_yes=True).confirm("Continue?")
    assert "Continue?" in capsys.readouterr().err
