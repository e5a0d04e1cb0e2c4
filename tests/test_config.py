"""Tests for VerifyConfig and the verify CLI argument mapping."""

from pathlib import Path

import pytest

from faceverify.verification.config import VerifyConfig
from faceverify.verify import build_parser, config_from_args, status_lines
from faceverify.verification.session import SessionState
from faceverify.verification.types import AttemptResult, Outcome, Phase


class TestVerifyConfig:
    def test_defaults(self):
        cfg = VerifyConfig()
        assert cfg.patch_size == 160
        assert cfg.desired_eye_distance == 80.0
        assert cfg.mqtt_enabled is False
        assert isinstance(cfg.model_path, Path)

    def test_paths_coerced(self):
        cfg = VerifyConfig(model_path="x.onnx", activity_log="logs/a.txt")
        assert cfg.model_path == Path("x.onnx")
        assert cfg.activity_log == Path("logs/a.txt")

    @pytest.mark.parametrize("kwargs", [
        {"patch_size": 0},
        {"patch_size": 161},
        {"desired_eye_distance": 0.0},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            VerifyConfig(**kwargs)


class TestCli:
    def test_defaults_map_to_config(self):
        cfg = config_from_args(build_parser().parse_args([]))
        assert cfg == VerifyConfig()

    def test_overrides(self):
        args = build_parser().parse_args([
            "--model", "m.onnx", "--camera", "2", "--no-mirror", "--threshold", "0.45",
            "--no-preview", "--mqtt", "broker.local", "--team-id", "lab", "-v",
        ])
        cfg = config_from_args(args)
        assert cfg.model_path == Path("m.onnx")
        assert cfg.camera_index == 2
        assert cfg.mirror is False
        assert cfg.match_threshold == 0.45
        assert cfg.preview is False
        assert cfg.mqtt_enabled and cfg.mqtt_broker == "broker.local"
        assert cfg.team_id == "lab"
        assert cfg.debug is True


class TestStatusLines:
    def test_after_comparison(self):
        class _W:
            dropped = 3

        state = SessionState()
        res = AttemptResult(outcome=Outcome.COMPARED, phase=Phase.RESOLVED, similarity=0.912, accepted=True)
        lines = status_lines(state, res, _W())
        assert lines[0] == "phase: idle"
        assert "similarity: 0.912 (MATCH)" in lines
        assert lines[-1] == "dropped frames: 3"
