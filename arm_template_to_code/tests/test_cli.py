import ast
from pathlib import Path

from click.testing import CliRunner

from arm_template_to_code.arm_template_to_code import arm_template_to_code
from arm_template_to_code.cli_utils import reconstruct_command_line

SCHEMA = str(Path(__file__).parent / "test_data" / "schemas" / "deploymentTemplate.json")


def invoke(*args, **kwargs):
    return CliRunner().invoke(arm_template_to_code, list(args), **kwargs)


class TestCli:
    def test_import_from_schema_url(self, tmp_path):
        output = tmp_path / "types.py"
        dump = tmp_path / "resolved.json"

        result = invoke("2019-04-01", str(output), "--schema-url", SCHEMA, "--resolved-dump", str(dump))

        assert result.exit_code == 0, result.output
        code = output.read_text()
        ast.parse(code)
        assert code.startswith("# Generated by arm_template_to_code v")
        assert "arm_template_to_code 2019-04-01 types.py" in code.splitlines()[0]
        assert "class MicrosoftFooWidgets:" in code
        assert dump.exists()

    def test_schema_url_from_environment(self, tmp_path):
        output = tmp_path / "types.py"

        result = invoke(
            "2019-04-01",
            str(output),
            "--resolved-dump",
            str(tmp_path / "resolved.json"),
            env={"SCHEMA_DEFINITION_URL": SCHEMA},
        )

        assert result.exit_code == 0, result.output
        assert "class MicrosoftFooWidgets:" in output.read_text()

    def test_include_and_exclude(self, tmp_path):
        output = tmp_path / "types.py"

        result = invoke(
            "2019-04-01",
            str(output),
            "--schema-url",
            SCHEMA,
            "--resolved-dump",
            str(tmp_path / "resolved.json"),
            "--include",
            "Microsoft.Foo.*",
            "--exclude",
            "Microsoft.Foo.Sku",
        )

        assert result.exit_code == 0, result.output
        code = output.read_text()
        assert "TemplateResource" not in code
        assert "MicrosoftFooSku =" not in code
        assert "    sku: Any = None" in code
        assert "--include Microsoft.Foo.* --exclude Microsoft.Foo.Sku" in code.splitlines()[0]

    def test_existing_output_requires_force(self, tmp_path):
        output = tmp_path / "types.py"
        output.write_text("# keep me\n")
        args = ["2019-04-01", str(output), "--schema-url", SCHEMA, "--resolved-dump", str(tmp_path / "resolved.json")]

        result = invoke(*args)
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert output.read_text() == "# keep me\n"

        result = invoke(*args, "--force")
        assert result.exit_code == 0, result.output
        assert "class MicrosoftFooWidgets:" in output.read_text()

    def test_retrieval_error_exits_non_zero(self, tmp_path):
        result = invoke("2019-04-01", str(tmp_path / "types.py"), "--schema-url", str(tmp_path / "missing.json"))

        assert result.exit_code == 1
        assert "Cannot read schema file" in result.output
        assert not (tmp_path / "types.py").exists()

    def test_unwritable_dump_exits_non_zero(self, tmp_path):
        result = invoke("2019-04-01", str(tmp_path / "types.py"), "--schema-url", SCHEMA, "--resolved-dump", str(tmp_path))

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert not isinstance(result.exception, OSError)
        assert not (tmp_path / "types.py").exists()

    def test_config_file(self, tmp_path):
        config = tmp_path / "config.json"
        config.write_text('{"schema_url": "%s", "exclude": ["Template.*"], "resolved_dump_path": ""}' % SCHEMA.replace("\\", "\\\\"))
        output = tmp_path / "types.py"

        result = invoke("2019-04-01", str(output), "--config", str(config))

        assert result.exit_code == 0, result.output
        code = output.read_text()
        assert "TemplateResource" not in code
        assert "class MicrosoftFooWidgets:" in code
        assert not (tmp_path / "resolved.json").exists()


def test_reconstruct_command_line_without_context():
    assert reconstruct_command_line(arm_template_to_code) == "arm_template_to_code"
