from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from memorygames.errors import ConfigError
from memorygames.tuning import GameTuning, LaneTuning, MathdropsTuning


def test_packaged_defaults_match_dataclass_defaults():
    assert GameTuning.load() == GameTuning()


def test_user_file_overlays_defaults(tmp_path: Path):
    user = tmp_path / "tuning.yaml"
    user.write_text(
        textwrap.dedent(
            """
            lives: 5
            lane_memory:
              activation_duration: 0.5
            mathdrops:
              ticks_per_second: 30
            """
        ),
        encoding="utf-8",
    )
    tuning = GameTuning.load(user)
    assert tuning.lives == 5
    assert tuning.lane_memory.activation_duration == 0.5
    assert tuning.lane_memory.pause_between_turns == 0.8
    assert tuning.mathdrops.tick_interval == pytest.approx(1 / 30)
    assert tuning.memory_tiles.show_duration == 3.0


def test_missing_user_file_falls_back_to_defaults(tmp_path: Path, caplog):
    tuning = GameTuning.load(tmp_path / "absent.yaml")
    assert tuning == GameTuning()
    assert any("User tuning file not found" in rec.message for rec in caplog.records)


def test_invalid_yaml_raises_config_error(tmp_path: Path):
    user = tmp_path / "broken.yaml"
    user.write_text("lane_memory: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError):
        GameTuning.load(user)


def test_unknown_key_raises_config_error():
    with pytest.raises(ConfigError):
        GameTuning.from_dict({"lane_memory": {"flash_speed": 2}})


def test_non_positive_values_rejected():
    with pytest.raises(ConfigError):
        GameTuning(lives=0)
    with pytest.raises(ConfigError):
        GameTuning(lane_memory=LaneTuning(activation_duration=0))
    # spawn_y sits above the play area and may be negative
    assert GameTuning(mathdrops=MathdropsTuning(spawn_y=-100.0)).mathdrops.spawn_y == -100.0
