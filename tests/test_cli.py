"""Tests for the CLI module."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from richtext2html import __version__
from richtext2html.cli import main

FIXTURE_DIR = Path(__file__).parent / "fixtures"
SAMPLE_JSON = FIXTURE_DIR / "sample.json"
SAMPLE_MD = FIXTURE_DIR / "sample.md"
SLICES_JSON = FIXTURE_DIR / "slices.json"


class TestCLIMain:
    """Test the main() entry point."""

    def test_list_presets(self, capsys):
        ret = main(["--list-presets"])
        assert ret == 0
        out = capsys.readouterr().out
        assert "Available markup presets:" in out
        assert "  - default" in out
        assert "  - xhtml" in out

    def test_missing_input(self):
        with pytest.raises(SystemExit):
            main([])

    def test_unknown_preset(self):
        with pytest.raises(SystemExit):
            main([str(SAMPLE_JSON), "-p", "academic"])

    def test_file_not_found(self, capsys):
        ret = main(["nonexistent.json"])
        assert ret == 1
        err = capsys.readouterr().err
        assert "not found" in err

    def test_convert_sample(self, tmp_path, capsys):
        out = tmp_path / "output.html"
        ret = main([str(SAMPLE_JSON), "-o", str(out)])
        assert ret == 0
        assert out.read_text(encoding="utf-8").startswith("<h1>Release notes</h1>")
        assert f"Converted: {out}" in capsys.readouterr().out

    def test_convert_markdown(self, tmp_path):
        out = tmp_path / "output.html"
        ret = main([str(SAMPLE_MD), "-o", str(out)])
        assert ret == 0
        assert "<ul><li>Faster <em>rendering</em></li>" in out.read_text(encoding="utf-8")

    def test_convert_slice_zone(self, tmp_path, capsys):
        out = tmp_path / "slices.html"
        ret = main([str(SLICES_JSON), "-o", str(out)])
        assert ret == 0
        html = out.read_text(encoding="utf-8")
        assert html.startswith('<div data-slicetype="intro" class="slice hero">')
        assert '<section data-field="name"><p>Ada</p></section>' in html

    def test_unsupported_fragment(self, tmp_path, capsys):
        src = tmp_path / "color.json"
        src.write_text('{"type": "Color", "value": "#fff"}', encoding="utf-8")
        ret = main([str(src)])
        assert ret == 1
        assert "Unsupported fragment type" in capsys.readouterr().err

    def test_verbose_flag(self, tmp_path, capsys):
        out = tmp_path / "output.html"
        ret = main([str(SAMPLE_JSON), "-o", str(out), "-v"])
        assert ret == 0
        stdout = capsys.readouterr().out
        assert "Input:" in stdout
        assert "Output:" in stdout
        assert "Preset: default" in stdout
        assert "Done." in stdout

    def test_default_output_name(self, tmp_path, capsys):
        src = tmp_path / "body.json"
        src.write_text('[{"type": "paragraph", "text": "Hi", "spans": []}]', encoding="utf-8")
        ret = main([str(src)])
        assert ret == 0
        assert (tmp_path / "body.html").read_text(encoding="utf-8") == "<p>Hi</p>"

    def test_text_format_default_name(self, tmp_path, capsys):
        src = tmp_path / "body.json"
        src.write_text('[{"type": "paragraph", "text": "Hi & bye", "spans": []}]', encoding="utf-8")
        ret = main([str(src), "-f", "text"])
        assert ret == 0
        assert (tmp_path / "body.txt").read_text(encoding="utf-8") == "Hi & bye"

    def test_presets(self, tmp_path, capsys):
        src = tmp_path / "body.json"
        src.write_text('[{"type": "paragraph", "text": "a\\nb", "spans": []}]', encoding="utf-8")
        for preset, expected in [("default", "<p>a<br>b</p>"), ("xhtml", "<p>a<br />b</p>")]:
            out = tmp_path / f"output_{preset}.html"
            ret = main([str(src), "-o", str(out), "-p", preset])
            assert ret == 0, f"Failed for preset: {preset}"
            assert out.read_text(encoding="utf-8") == expected

    def test_invalid_json(self, tmp_path, capsys):
        src = tmp_path / "broken.json"
        src.write_text("{not json", encoding="utf-8")
        ret = main([str(src)])
        assert ret == 1
        assert "Error:" in capsys.readouterr().err

    def test_not_a_block_list(self, tmp_path, capsys):
        src = tmp_path / "object.json"
        src.write_text('{"type": "paragraph"}', encoding="utf-8")
        ret = main([str(src)])
        assert ret == 1
        assert "Error:" in capsys.readouterr().err


class TestCLIModule:
    def test_version_via_module(self):
        result = subprocess.run(
            [sys.executable, "-m", "richtext2html.cli", "--version"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert __version__ in result.stdout
