"""Tests for CLI commands."""

import pytest
from click.testing import CliRunner

from asciidoc_transformer.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "asciidoc_transformer.config.hierarchy._GLOBAL_CONFIG_PATH", tmp_path / "missing.yaml"
    )
    monkeypatch.chdir(tmp_path)


class TestCLIGroup:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "asciidoc-transformer" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0


class TestRenderCommand:
    def test_help(self, runner):
        result = runner.invoke(cli, ["render", "--help"])
        assert result.exit_code == 0
        assert "--output" in result.output

    def test_renders_to_stdout(self, runner, sample_adoc_file):
        result = runner.invoke(cli, ["render", str(sample_adoc_file)])
        assert result.exit_code == 0
        assert '<h2 id="_installation">Installation</h2>' in result.output

    def test_renders_to_file(self, runner, sample_adoc_file, tmp_path):
        out = tmp_path / "guide.html"
        result = runner.invoke(cli, ["render", str(sample_adoc_file), "-o", str(out)])
        assert result.exit_code == 0
        assert "Installation" in out.read_text()

    def test_nonexistent_file(self, runner):
        result = runner.invoke(cli, ["render", "nonexistent_file.adoc"])
        assert result.exit_code != 0

    def test_undecodable_file(self, runner, tmp_path):
        bad = tmp_path / "bad.adoc"
        bad.write_bytes(b"\xff\xfe")
        result = runner.invoke(cli, ["render", str(bad)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Error:" in result.output

    def test_invalid_options_from_config(self, runner, sample_adoc_file, tmp_path):
        (tmp_path / "asciidoc-transformer.yaml").write_text("options:\n  backend: pdf\n")
        result = runner.invoke(cli, ["render", str(sample_adoc_file)])
        assert result.exit_code == 1
        assert "backend" in result.output


class TestHeadingsCommand:
    def test_shows_table(self, runner, sample_adoc_file):
        result = runner.invoke(cli, ["headings", str(sample_adoc_file)])
        assert result.exit_code == 0
        assert "Headings" in result.output
        assert "_installation" in result.output

    def test_depth_filter(self, runner, sample_adoc_file):
        result = runner.invoke(cli, ["headings", str(sample_adoc_file), "--depth", "2"])
        assert result.exit_code == 0
        assert "From source" in result.output
        assert "Usage" not in result.output


class TestInfoCommand:
    def test_shows_metadata(self, runner, sample_adoc_file):
        result = runner.invoke(cli, ["info", str(sample_adoc_file)])
        assert result.exit_code == 0
        assert "Document Info" in result.output
        assert "Jane Doe" in result.output
        assert "1 min" in result.output

    def test_invalid_speed(self, runner, sample_adoc_file):
        result = runner.invoke(cli, ["info", str(sample_adoc_file), "--speed", "0"])
        assert result.exit_code == 1


class TestMimeTypesCommand:
    def test_lists_types(self, runner):
        result = runner.invoke(cli, ["mime-types"])
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "text/asciidoc"
        assert len(result.output.splitlines()) == 8
