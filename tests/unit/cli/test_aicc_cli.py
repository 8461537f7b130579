import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import aicc.interface.cli.cli as cli_mod
from aicc.cli import cli


@pytest.fixture
def project_dir(tmp_path: Path, home_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    d = tmp_path / "project"
    d.mkdir()
    monkeypatch.chdir(d)
    return d


@pytest.fixture
def install_transport(monkeypatch: pytest.MonkeyPatch):
    """Route every CLI-created LLMClient through the given transport."""

    def _install(transport):
        monkeypatch.setattr(cli_mod, "_new_client", transport.client, raising=True)
        return transport

    return _install


def _invoke(args: list[str], input: str | None = None):
    return CliRunner().invoke(cli, args, input=input, prog_name="aicc")


def test_cli_loads_and_help_works() -> None:
    result = _invoke(["--help"])

    assert result.exit_code == 0
    assert result.exception is None
    assert "Usage: aicc" in result.output
    for command in ("run", "session", "providers", "models", "check"):
        assert command in result.output


class TestProviders:
    def test_json(self, project_dir, monkeypatch) -> None:
        monkeypatch.setenv("GROQ_API_KEY", "gsk-test")

        result = _invoke(["--json", "providers"])

        assert result.exit_code == 0
        obj = json.loads(result.output)
        assert obj["command"] == "providers"
        assert obj["schema_version"] == 1
        by_id = {p["id"]: p for p in obj["providers"]}
        assert list(by_id) == ["deepseek", "openai", "anthropic", "groq", "ollama"]
        assert by_id["deepseek"]["selected"] is True
        assert by_id["groq"]["connected"] is True
        assert by_id["openai"]["connected"] is False
        assert by_id["ollama"]["requires_credential"] is False
        assert result.output.count("\n") == 1

    def test_human_output(self, project_dir) -> None:
        result = _invoke(["providers"])

        assert result.exit_code == 0
        assert "* deepseek" in result.output
        assert "no API key" in result.output

    def test_project_config_selects_provider(self, project_dir) -> None:
        (project_dir / ".aicc").mkdir()
        (project_dir / ".aicc" / "config.yml").write_text(
            "provider: ollama\nmodels:\n  ollama: phi3\n", encoding="utf-8"
        )

        obj = json.loads(_invoke(["--json", "providers"]).output)

        selected = [p for p in obj["providers"] if p["selected"]]
        assert selected[0]["id"] == "ollama"
        assert selected[0]["model"] == "phi3"

    def test_invalid_config(self, project_dir) -> None:
        (project_dir / ".aicc").mkdir()
        (project_dir / ".aicc" / "config.yml").write_text("- not a mapping\n", encoding="utf-8")

        result = _invoke(["--json", "providers"])

        assert result.exit_code == 1
        assert "mapping" in json.loads(result.output)["error"]


class TestRun:
    def test_json_yes_executes(self, project_dir, home_dir, install_transport, make_transport, replies) -> None:
        (home_dir / "reports").mkdir()
        install_transport(make_transport(payload=replies["generate"]("import os\nprint(sorted(os.listdir('.')))")))

        result = _invoke(["--json", "run", "list my home folder", "--provider", "ollama", "--yes"])

        assert result.exit_code == 0
        obj = json.loads(result.output)
        assert obj["command"] == "run"
        assert obj["provider"] == "ollama"
        assert obj["model"] == "llama3.2:3b"
        assert obj["accepted"] is True
        assert obj["executed"] is True
        assert obj["exit_status"] == 0
        assert obj["display"] == "['reports']\n"

    def test_model_option(self, project_dir, install_transport, make_transport, replies) -> None:
        transport = install_transport(make_transport(payload=replies["generate"]("import os\nprint(1)")))

        result = _invoke(["--json", "run", "print one", "--provider", "ollama", "--model", "phi3", "-y"])

        assert result.exit_code == 0
        assert transport.last_json["model"] == "phi3"

    def test_confirmed_at_prompt(self, project_dir, install_transport, make_transport, replies) -> None:
        install_transport(make_transport(payload=replies["generate"]("import os\nprint('hello there')")))

        result = _invoke(["run", "say hello", "--provider", "ollama"], input="y\n")

        assert result.exit_code == 0
        assert "print('hello there')" in result.output
        assert "hello there\n" in result.output

    def test_declined_at_prompt(self, project_dir, home_dir, install_transport, make_transport, replies) -> None:
        install_transport(make_transport(payload=replies["generate"]("import os\nos.makedirs('made')")))

        result = _invoke(["run", "make a folder", "--provider", "ollama"], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled." in result.output
        assert not (home_dir / "made").exists()

    def test_script_exit_code_propagates(self, project_dir, install_transport, make_transport, replies) -> None:
        code = "import os\nimport sys\nsys.stderr.write('no such folder')\nsys.exit(2)"
        install_transport(make_transport(payload=replies["generate"](code)))

        result = _invoke(["run", "remove folder", "--provider", "ollama", "--yes"])

        assert result.exit_code == 2
        assert "Error: no such folder" in result.output

    def test_unsafe_code(self, project_dir, install_transport, make_transport, replies) -> None:
        install_transport(make_transport(payload=replies["generate"]("import os\nexec('x=1')")))

        result = _invoke(["--json", "run", "do it", "--provider", "ollama", "--yes"])

        assert result.exit_code == 1
        obj = json.loads(result.output)
        assert obj["accepted"] is False
        assert obj["reason"] == "exec("

    def test_missing_credential(self, project_dir, install_transport, make_transport, replies) -> None:
        transport = install_transport(make_transport(payload=replies["choices"]("import os")))

        result = _invoke(["run", "list files", "--yes"])

        assert result.exit_code == 1
        assert "No API key provided for 'deepseek'" in result.output
        assert transport.requests == []

    def test_credential_from_environment(self, project_dir, monkeypatch, install_transport, make_transport, replies) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        transport = install_transport(make_transport(payload=replies["choices"]("import os\nprint(2)")))

        result = _invoke(["--json", "run", "print two", "--provider", "openai", "--yes"])

        assert result.exit_code == 0
        assert transport.requests[0].headers["authorization"] == "Bearer sk-env"

    def test_unknown_provider(self, project_dir) -> None:
        result = _invoke(["--json", "run", "x", "--provider", "bard", "--yes"])

        assert result.exit_code == 1
        assert "bard" in json.loads(result.output)["error"]

    def test_http_error(self, project_dir, install_transport, make_transport) -> None:
        install_transport(make_transport(status_code=429, payload={"error": "rate limited"}))

        result = _invoke(["run", "x", "--provider", "ollama", "--yes"])

        assert result.exit_code == 1
        assert "HTTP error: 429" in result.output

    def test_events_flag(self, project_dir, install_transport, make_transport, replies) -> None:
        install_transport(make_transport(payload=replies["generate"]("import os\nprint(1)")))

        result = _invoke(["--events", "run", "print one", "--provider", "ollama", "--yes"])

        assert result.exit_code == 0
        assert "[EVENT] code_generated provider=ollama" in result.output
        assert "[EVENT] execution_completed exit=0" in result.output


class TestModels:
    def test_groq_fixed_list(self, project_dir) -> None:
        result = _invoke(["--json", "models", "--provider", "groq"])

        assert result.exit_code == 0
        obj = json.loads(result.output)
        assert obj["provider"] == "groq"
        assert "llama3-70b-8192" in obj["models"]
        assert obj["selected"] == "openai/gpt-oss-20b"

    def test_ollama_discovery(self, project_dir, install_transport, make_transport) -> None:
        install_transport(make_transport(payload={"models": [{"name": "phi3"}]}))

        result = _invoke(["models", "--provider", "ollama"])

        assert result.exit_code == 0
        assert "* phi3" in result.output

    def test_ollama_unreachable(self, project_dir, install_transport, make_transport) -> None:
        install_transport(make_transport(status_code=502, payload="bad gateway"))

        result = _invoke(["models", "--provider", "ollama"])

        assert result.exit_code == 0
        assert "No models available for ollama." in result.output


class TestCheck:
    def test_accepted(self, tmp_path: Path) -> None:
        script = tmp_path / "tidy.py"
        script.write_text("import shutil\nshutil.move('a', 'b')\n", encoding="utf-8")

        result = _invoke(["check", str(script)])

        assert result.exit_code == 0
        assert "Accepted" in result.output

    def test_rejected_json(self, tmp_path: Path) -> None:
        script = tmp_path / "bad.py"
        script.write_text("import os\nos.system('ls')\n", encoding="utf-8")

        result = _invoke(["--json", "check", str(script)])

        assert result.exit_code == 1
        obj = json.loads(result.output)
        assert obj["accepted"] is False
        assert obj["reason"] == "os.system"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = _invoke(["check", str(tmp_path / "nope.py")])

        assert result.exit_code == 2


class TestSession:
    def test_history_and_clear(self, project_dir, install_transport, make_transport, replies) -> None:
        install_transport(make_transport(payload=replies["generate"]("import os\nprint('ok')")))

        result = _invoke(
            ["session", "--provider", "ollama", "--yes"],
            input="make a folder\n:history\n:clear\n:history\n:quit\n",
        )

        assert result.exit_code == 0
        assert "Using Ollama (Local) (llama3.2:3b), connected." in result.output
        assert "1. make a folder -> ok" in result.output
        assert "History cleared." in result.output
        assert "No history." in result.output

    def test_errors_do_not_end_session(self, project_dir, install_transport, make_transport, replies) -> None:
        install_transport(make_transport(payload=replies["generate"]("import subprocess")))

        result = _invoke(["session", "--provider", "ollama", "--yes"], input="list\n\n")

        assert result.exit_code == 0
        assert "Generated code was rejected: subprocess" in result.output

    def test_previous_request_reaches_prompt(self, project_dir, install_transport, make_transport, replies) -> None:
        transport = install_transport(make_transport(payload=replies["generate"]("import os\nprint('ok')")))

        result = _invoke(["session", "--provider", "ollama", "--yes"], input="first thing\nsecond thing\n")

        assert result.exit_code == 0
        assert "Last command: first thing" in transport.last_json["prompt"]
