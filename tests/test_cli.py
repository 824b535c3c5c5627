import json
from pathlib import Path

from click.testing import CliRunner

from openapi_compat.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliHelp:
    def test_no_arguments_prints_usage(self):
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 0
        assert "compare" in result.output
        assert "validate-all" in result.output
        assert "migration-report" in result.output

    def test_help_command(self):
        result = CliRunner().invoke(main, ["help"])
        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_unknown_command_exits_1(self):
        result = CliRunner().invoke(main, ["diff-everything"])
        assert result.exit_code == 1
        assert "No such command" in result.output

    def test_missing_arguments_exit_1(self):
        result = CliRunner().invoke(main, ["compare", str(FIXTURES / "users_v1.yaml")])
        assert result.exit_code == 1
        assert "Missing argument" in result.output


class TestCliCompare:
    def test_identical_specs_are_safe(self):
        spec = str(FIXTURES / "users_v1.yaml")
        result = CliRunner().invoke(main, ["compare", spec, spec])
        assert result.exit_code == 0
        assert "No breaking changes detected!" in result.output
        assert "Recommendation: safe to release" in result.output

    def test_additive_release_exits_0(self):
        result = CliRunner().invoke(main, [
            "compare", str(FIXTURES / "users_v1.yaml"), str(FIXTURES / "users_v2.yaml"),
        ])
        assert result.exit_code == 0

    def test_breaking_release_exits_1(self):
        result = CliRunner().invoke(main, [
            "compare", str(FIXTURES / "users_v1.yaml"), str(FIXTURES / "users_breaking.yaml"),
        ])
        assert result.exit_code == 1
        assert "Critical: 4" in result.output
        assert "Recommendation: block" in result.output

    def test_json_format(self):
        result = CliRunner().invoke(main, [
            "compare", str(FIXTURES / "users_v1.yaml"), str(FIXTURES / "users_breaking.yaml"),
            "--format", "json",
        ])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["recommendation"] == "block"
        assert len(data["changes"]) == 7

    def test_unwritable_output_exits_1(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("plain file", encoding="utf-8")
        out = blocker / "report.txt"
        spec = str(FIXTURES / "users_v1.yaml")

        result = CliRunner().invoke(main, ["compare", spec, spec, "-o", str(out)])

        assert result.exit_code == 1
        assert f"Could not write report {out}" in result.output
        assert "Traceback" not in result.output

    def test_output_file(self, tmp_path):
        out = tmp_path / "report.txt"
        result = CliRunner().invoke(main, [
            "compare", str(FIXTURES / "users_v1.yaml"), str(FIXTURES / "users_v2.yaml"),
            "-o", str(out),
        ])
        assert result.exit_code == 0
        assert "No breaking changes detected!" in out.read_text(encoding="utf-8")

    def test_missing_file_exits_1(self, tmp_path):
        missing = tmp_path / "missing.yaml"
        result = CliRunner().invoke(main, ["compare", str(FIXTURES / "users_v1.yaml"), str(missing)])
        assert result.exit_code == 1
        assert f"File not found: {missing}" in result.output
        assert "Traceback" not in result.output

    def test_malformed_file_exits_1(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("openapi: 3.0.0\npaths: [oops\n", encoding="utf-8")
        result = CliRunner().invoke(main, ["compare", str(bad), str(FIXTURES / "users_v1.yaml")])
        assert result.exit_code == 1
        assert f"Failed to parse OpenAPI spec {bad}" in result.output


class TestCliValidateAll:
    def test_three_version_chain(self, make_layout):
        root = make_layout({"v1": "users_v1.yaml", "v2": "users_v2.yaml", "v3": "users_v3.yaml"})
        result = CliRunner().invoke(main, ["validate-all", "--root", str(root), "--versions", "v1,v2,v3"])

        assert result.exit_code == 1
        assert "v1 -> v2: PASS" in result.output
        assert "v2 -> v3: FAIL (1 critical" in result.output
        assert "Overall Result: FAILED" in result.output

    def test_settings_from_environment(self, make_layout):
        root = make_layout({"v1": "users_v1.yaml", "v2": "users_v2.yaml"})
        result = CliRunner().invoke(
            main,
            ["validate-all"],
            env={"OPENAPI_COMPAT_ROOT": str(root), "OPENAPI_COMPAT_VERSIONS": "v1,v2"},
        )
        assert result.exit_code == 0
        assert "Overall Result: PASSED" in result.output

    def test_missing_version_does_not_crash(self, make_layout):
        root = make_layout({"v1": "users_v1.yaml", "v2": "users_v2.yaml", "v4": "users_v2.yaml"})
        result = CliRunner().invoke(main, ["validate-all", "--root", str(root)])

        assert result.exit_code == 0
        assert "v1 -> v2: PASS" in result.output
        assert "v2 -> v3: SKIPPED" in result.output
        assert "v3 -> v4: SKIPPED" in result.output

    def test_parallel_workers(self, make_layout):
        root = make_layout({"v1": "users_v1.yaml", "v2": "users_v2.yaml", "v3": "users_v3.yaml"})
        result = CliRunner().invoke(main, [
            "validate-all", "--root", str(root), "--versions", "v1,v2,v3", "--workers", "2",
        ])
        assert result.exit_code == 1
        assert result.output.index("v1 -> v2: PASS") < result.output.index("v2 -> v3: FAIL")


class TestCliMigrationReport:
    def test_writes_report_file(self, make_layout, tmp_path, monkeypatch):
        root = make_layout({"v1": "users_v1.yaml", "v2": "users_breaking.yaml"})
        workdir = tmp_path / "work"
        workdir.mkdir()
        monkeypatch.chdir(workdir)

        result = CliRunner().invoke(main, ["migration-report", "v1", "v2", "--root", str(root)])

        assert result.exit_code == 0
        report_file = workdir / "api-migration-report-v1-to-v2.md"
        assert report_file.exists()
        content = report_file.read_text(encoding="utf-8")
        assert "Comparing: v1 -> v2" in content
        assert "Endpoint removed: /orders" in content
        assert content in result.output
        assert "Report saved to: api-migration-report-v1-to-v2.md" in result.output

    def test_unknown_version_exits_1(self, make_layout, tmp_path, monkeypatch):
        root = make_layout({"v1": "users_v1.yaml"})
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(main, ["migration-report", "v1", "v7", "--root", str(root)])

        assert result.exit_code == 1
        assert "Could not find API specs for versions v1 or v7" in result.output
        assert not (tmp_path / "api-migration-report-v1-to-v7.md").exists()

    def test_unparseable_spec_exits_1(self, make_layout, tmp_path, monkeypatch):
        root = make_layout({"v1": "users_v1.yaml", "v2": "users_v2.yaml"})
        broken = root / "v2" / "current" / "openapi.yaml"
        broken.write_text("paths: [\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        result = CliRunner().invoke(main, ["migration-report", "v1", "v2", "--root", str(root)])

        assert result.exit_code == 1
        assert "Failed to parse OpenAPI spec" in result.output

    def test_report_path_taken_by_directory_exits_1(self, make_layout, tmp_path, monkeypatch):
        root = make_layout({"v1": "users_v1.yaml", "v2": "users_v2.yaml"})
        monkeypatch.chdir(tmp_path)
        (tmp_path / "api-migration-report-v1-to-v2.md").mkdir()

        result = CliRunner().invoke(main, ["migration-report", "v1", "v2", "--root", str(root)])

        assert result.exit_code == 1
        assert "Could not write report api-migration-report-v1-to-v2.md" in result.output
        assert "Traceback" not in result.output
