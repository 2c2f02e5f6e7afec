"""
Tests for the command-line interface.
"""

import json
import os

import pytest

from letterflow.cli import load_letter, main, parse_block
from letterflow import InvalidConfigurationError, SeparatorBlock, TextBlock


@pytest.fixture
def letter_file(tmp_path, png_data_uri):
    def write(options=None, blocks=None):
        data = {
            "options": {
                "file_name": str(tmp_path / "from-json"),
                "dept_signature": png_data_uri,
                **(options or {}),
            },
            "blocks": blocks if blocks is not None else [
                {"type": "text", "content": "# Notice\n\nDear Sir or Madam,"},
                {"type": "separator", "spacing_before": "4mm"},
                {"type": "text", "content": "Regards", "style": {"text_align": "right"}},
            ],
        }
        path = tmp_path / "letter.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return write


class TestParsing:
    """Test JSON to block conversion."""

    def test_parse_blocks(self):
        text = parse_block({"type": "text", "content": "Hi", "allow_pagebreak": False})
        assert isinstance(text, TextBlock)
        assert text.allow_pagebreak is False
        separator = parse_block({"type": "separator", "spacing_after": "3mm"})
        assert isinstance(separator, SeparatorBlock)
        assert separator.spacing_after == "3mm"

    def test_unknown_block_type(self):
        with pytest.raises(InvalidConfigurationError):
            parse_block({"type": "image"})

    def test_unknown_style_key(self):
        with pytest.raises(InvalidConfigurationError, match="Invalid block style"):
            parse_block({"type": "text", "content": "Hi", "style": {"colour": "red"}})

    def test_load_letter(self, letter_file):
        options, blocks = load_letter(letter_file(options={"font_dirs": ["/tmp/fonts"]}))
        assert options.font_dirs == ("/tmp/fonts",)
        assert [block.kind for block in blocks] == ["text", "separator", "text"]
        assert blocks[2].style.text_align == "right"

    def test_unknown_option(self, letter_file):
        with pytest.raises(InvalidConfigurationError):
            load_letter(letter_file(options={"colour": "blue"}))


class TestMain:
    """Test the render command end to end."""

    def test_render(self, letter_file, tmp_path, capsys):
        assert main(["render", letter_file()]) == 0
        assert os.path.exists(tmp_path / "from-json.pdf")
        assert "1 page)" in capsys.readouterr().out

    def test_output_override(self, letter_file, tmp_path):
        output = tmp_path / "custom.pdf"
        assert main(["render", letter_file(), "--output", str(output)]) == 0
        assert output.exists()

    def test_invalid_letter_reports_error(self, letter_file, capsys):
        assert main(["render", letter_file(options={"file_name": ""})]) == 1
        assert "fileName is required" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["render", str(tmp_path / "absent.json")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_unknown_style_key_reports_error(self, letter_file, capsys):
        path = letter_file(blocks=[{"type": "text", "content": "Hi", "style": {"size": "12pt"}}])
        assert main(["render", path]) == 1
        assert "Invalid block style" in capsys.readouterr().err

    def test_layout_warnings_go_to_stderr(self, letter_file, tmp_path, capsys):
        path = letter_file(options={"dept_signature": str(tmp_path / "missing.png")})
        assert main(["render", path]) == 0
        err = capsys.readouterr().err
        assert "1 layout warning(s):" in err
        assert "Failed to load" in err

    def test_invalid_log_level_falls_back_to_info(self, letter_file, monkeypatch):
        monkeypatch.setenv("LETTERFLOW_LOG_LEVEL", "chatty")
        assert main(["render", letter_file()]) == 0
