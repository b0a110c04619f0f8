# tests/test_cli_commands.py

import json
import subprocess
import sys
from pathlib import Path

import pytest
import yaml


def _run(*args, input=None, cwd=None):
    return subprocess.run(
        [sys.executable, "-m", "jsonderef.cli", *args], capture_output=True, text=True, input=input, cwd=cwd
    )


@pytest.fixture
def sample_schemas(tmp_path):
    schemas_dir = tmp_path / "schemas"
    schemas_dir.mkdir()

    user_schema = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "User",
        "type": "object",
        "required": ["id", "name"],
        "properties": {
            "id": {"type": "integer"},
            "name": {"type": "string"},
            "emails": {"type": "array", "items": {"type": "string", "format": "email"}},
        },
    }

    event_schema = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "title": "Event",
        "type": "object",
        "required": ["event_id", "user"],
        "properties": {
            "event_id": {"type": "string"},
            "user": {"$ref": "./user.json", "description": "who did it"},
            "timestamp": {"type": "string", "format": "date-time"},
        },
    }

    (schemas_dir / "user.json").write_text(json.dumps(user_schema, indent=2))
    (schemas_dir / "event.json").write_text(json.dumps(event_schema, indent=2))
    return schemas_dir


class TestCLI:
    def test_diagnose_command(self):
        result = _run("diagnose")
        assert result.returncode == 0
        assert "Dependencies" in result.stdout
        assert "PyYAML" in result.stdout

    def test_resolve_to_stdout(self, sample_schemas):
        result = _run("resolve", str(sample_schemas / "event.json"))

        assert result.returncode == 0, result.stderr
        resolved = json.loads(result.stdout)
        assert resolved["properties"]["user"]["title"] == "User"
        assert "$ref" not in result.stdout

    def test_resolve_with_reference_key(self, sample_schemas):
        result = _run("resolve", str(sample_schemas / "event.json"), "--reference-key", "__reference__")

        assert result.returncode == 0, result.stderr
        user = json.loads(result.stdout)["properties"]["user"]
        assert user["__reference__"] == {"description": "who did it"}

    def test_resolve_to_yaml_file(self, sample_schemas, tmp_path):
        out = tmp_path / "out" / "event.yaml"

        result = _run("resolve", str(sample_schemas / "event.json"), "--output", str(out))

        assert result.returncode == 0, result.stderr
        assert "[OK]" in result.stdout
        assert yaml.safe_load(out.read_text(encoding="utf-8"))["properties"]["user"]["type"] == "object"

    def test_check_mode(self, sample_schemas, tmp_path):
        out = tmp_path / "event.json"
        _run("resolve", str(sample_schemas / "event.json"), "-o", str(out))

        fresh = _run("resolve", str(sample_schemas / "event.json"), "-o", str(out), "--check")
        assert fresh.returncode == 0
        assert "up to date" in fresh.stdout

        out.write_text("{}")
        stale = _run("resolve", str(sample_schemas / "event.json"), "-o", str(out), "--check")
        assert stale.returncode == 1
        assert out.read_text() == "{}"

    def test_check_requires_output(self, sample_schemas):
        result = _run("resolve", str(sample_schemas / "event.json"), "--check")
        assert result.returncode == 2

    def test_resolve_stdin(self, sample_schemas):
        stdin = '{"u": {"$ref": "user.json#/properties/id"}}'
        result = _run("resolve", "-", "--sort-keys", "--indent", "0", input=stdin, cwd=sample_schemas)

        assert result.returncode == 0, result.stderr
        assert result.stdout == '{"u": {"type": "integer"}}\n'

    def test_missing_pointer_fails(self, sample_schemas):
        (sample_schemas / "bad.json").write_text(json.dumps({"x": {"$ref": "user.json#/definitions/nope"}}))

        result = _run("resolve", str(sample_schemas / "bad.json"))

        assert result.returncode == 1
        assert "user.json#/definitions/nope" in result.stderr
        assert result.stdout == ""

    def test_verbose_logs_fetches(self, sample_schemas):
        result = _run("resolve", str(sample_schemas / "event.json"), "-v")

        assert result.returncode == 0, result.stderr
        assert "[read]" in result.stderr
        assert "[fetch]" in result.stderr
        assert Path(sample_schemas / "user.json").resolve().as_uri() in result.stderr
