"""
Tests for the CLI entry point.

Tests cover:
- Argument parsing and config overrides
- KEY=VALUE override decoding
- End-to-end terminal run output
- Error exit on invalid configuration (bad values, section overrides)
- Help text
"""

import json

import pytest

import main as cli
from lifegrid.core.config import get_default_config, save_config


class TestBuildConfig:
    def test_defaults(self):
        config = cli.build_config(cli.parse_args([]))
        assert config == get_default_config()

    def test_flag_overrides(self):
        args = cli.parse_args([
            "--width", "20", "--height", "10", "--pattern", "glider",
            "--seed", "3", "--frames", "7", "--fps", "0",
        ])
        config = cli.build_config(args)
        assert config.universe.width == 20
        assert config.universe.height == 10
        assert config.universe.pattern == "glider"
        assert config.universe.seed == 3
        assert config.loop.max_frames == 7
        assert config.loop.fps == 0

    def test_set_overrides(self):
        args = cli.parse_args([
            "--set", "render.alive_glyph=#",
            "--set", "loop.stop_when_static=true",
            "--set", "universe.density=0.25",
        ])
        config = cli.build_config(args)
        assert config.render.alive_glyph == "#"
        assert config.loop.stop_when_static is True
        assert config.universe.density == 0.25

    def test_config_file(self, tmp_path):
        cfg = get_default_config()
        cfg.universe.pattern = "toad"
        path = tmp_path / "config.json"
        save_config(cfg, path)
        config = cli.build_config(cli.parse_args(["--config", str(path), "--width", "9"]))
        assert config.universe.pattern == "toad"
        assert config.universe.width == 9

    def test_invalid_override_value(self):
        with pytest.raises(ValueError):
            cli.build_config(cli.parse_args(["--width", "0"]))

    def test_unknown_override_key(self):
        with pytest.raises(KeyError):
            cli.build_config(cli.parse_args(["--set", "universe.depth=3"]))

    def test_non_numeric_density(self):
        with pytest.raises(ValueError, match="universe.density must be a number"):
            cli.build_config(cli.parse_args(["--set", 'universe.density="x"']))

    def test_whole_section_override(self):
        with pytest.raises(KeyError):
            cli.build_config(cli.parse_args(["--set", "universe=5"]))

    def test_method_name_override(self):
        with pytest.raises(KeyError):
            cli.build_config(cli.parse_args(["--set", "universe.validate=1"]))

    def test_non_numeric_fps_in_config_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"loop": {"fps": "fast"}}), encoding="utf-8")
        with pytest.raises(ValueError, match="loop.fps"):
            cli.build_config(cli.parse_args(["--config", str(path)]))


class TestParseArgs:
    def test_frames_help_names_static_stop(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.parse_args(["--help"])
        assert exc.value.code == 0
        help_text = " ".join(capsys.readouterr().out.split())
        assert "0 = until interrupted" in help_text
        assert "loop.stop_when_static=true" in help_text
        assert "until static or interrupted" not in help_text


class TestParseOverride:
    def test_json_value(self):
        assert cli._parse_override("universe.width=12") == ("universe.width", 12)

    def test_text_value(self):
        assert cli._parse_override("universe.pattern=glider") == ("universe.pattern", "glider")

    def test_value_with_equals(self):
        assert cli._parse_override("render.alive_glyph==") == ("render.alive_glyph", "=")

    def test_missing_equals(self):
        with pytest.raises(ValueError):
            cli._parse_override("universe.width")


class TestMain:
    def test_run_prints_frames(self, capsys):
        cli.main([
            "--pattern", "blinker", "--width", "5", "--height", "5",
            "--frames", "2", "--fps", "0",
            "--set", "render.dead_glyph=.", "--set", "render.alive_glyph=#",
        ])
        out = capsys.readouterr().out
        assert "[Life Simulator]" in out
        assert ".....\n.....\n.###.\n.....\n....." in out
        assert ".....\n..#..\n..#..\n..#..\n....." in out
        assert "Frames: 2" in out
        assert "Final generation: 2" in out

    def test_quiet(self, capsys):
        cli.main(["--pattern", "block", "--width", "6", "--height", "6",
                  "--frames", "3", "--fps", "0", "--quiet",
                  "--set", "render.alive_glyph=#"])
        out = capsys.readouterr().out
        assert "#" not in out
        assert "Static: True" in out

    def test_invalid_config_exits(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--width", "0"])
        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().out

    @pytest.mark.parametrize("override", ['universe.density="x"', "universe=5", "loop.fps=fast"])
    def test_bad_override_exits_cleanly(self, capsys, override):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--set", override])
        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().out

    def test_missing_config_file_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            cli.main(["--config", str(tmp_path / "missing.json")])

    def test_malformed_config_file_exits(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(SystemExit):
            cli.main(["--config", str(path)])
