"""Tests for config loading and validation."""

from pathlib import Path

import pytest
import yaml

from planner.plan_animation import (
    CONFIG_PATH,
    DEFAULTS,
    AnimationPlan,
    AxisRange,
    InvalidConfiguration,
    build_plan,
    load_config,
    parse_axis_range,
)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "animation.yml"
    path.write_text(
        yaml.safe_dump(
            {
                "series_count": 3,
                "total_duration": 0.3,
                "frames_per_second": 10,
                "step_std_dev": 0.0,
                "output_path": str(tmp_path / "out.gif"),
                "axis_range": {"min": 0, "max": 1, "step": 0.2},
            }
        ),
        encoding="utf-8",
    )
    return path


class TestLoadConfig:
    def test_shipped_config_is_valid(self):
        plan = build_plan(load_config(CONFIG_PATH))
        assert isinstance(plan, AnimationPlan)
        assert plan.axis_range == AxisRange(0.0, 1.0, 0.2)
        assert plan.step_std_dev == 0.05
        assert plan.loop is True

    def test_reads_yaml_mapping(self, config_file):
        raw = load_config(config_file)
        assert raw["series_count"] == 3
        assert raw["axis_range"]["step"] == 0.2

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Missing config"):
            load_config(tmp_path / "nope.yml")

    def test_empty_file_is_empty_mapping(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == {}

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(InvalidConfiguration, match="mapping"):
            load_config(path)


class TestBuildPlan:
    def test_defaults(self):
        plan = build_plan()
        assert plan.series_count == DEFAULTS["series_count"]
        assert plan.output_path == Path(DEFAULTS["output_path"])
        assert plan.seed is None

    def test_frame_time_from_fps(self, config_file):
        plan = build_plan(load_config(config_file))
        assert plan.frame_time == pytest.approx(0.1)

    def test_overrides_win_and_none_is_ignored(self, config_file):
        plan = build_plan(load_config(config_file), series_count=8, seed=None, loop=False)
        assert plan.series_count == 8
        assert plan.seed is None
        assert plan.loop is False
        assert plan.total_duration == 0.3

    @pytest.mark.parametrize(
        "key, value",
        [
            ("series_count", 0),
            ("series_count", -1),
            ("series_count", 1.5),
            ("series_count", True),
            ("total_duration", 0),
            ("total_duration", -3.0),
            ("total_duration", "long"),
            ("frames_per_second", 0),
            ("frames_per_second", float("nan")),
            ("step_std_dev", -0.01),
            ("seed", "abc"),
            ("output_path", ""),
            ("loop", "yes"),
            ("width", 0),
            ("dpi", -100),
        ],
    )
    def test_rejects_bad_values(self, key, value):
        with pytest.raises(InvalidConfiguration, match=key):
            build_plan({key: value})

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidConfiguration, match="Unknown config key"):
            build_plan({"frames_per_sec": 10})

    def test_invalid_configuration_is_value_error(self):
        with pytest.raises(ValueError):
            build_plan({"series_count": 0})


class TestAxisRange:
    def test_mapping(self):
        assert parse_axis_range({"min": 0, "max": 1, "step": 0.2}) == AxisRange(0.0, 1.0, 0.2)

    def test_list(self):
        assert parse_axis_range([0, 10, 2]) == AxisRange(0.0, 10.0, 2.0)

    def test_passthrough(self):
        axis = AxisRange(0.0, 1.0, 0.25)
        assert parse_axis_range(axis) == axis

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "0..1",
            [0, 1],
            {"min": 0, "max": 1},
            {"min": 1, "max": 1, "step": 0.2},
            {"min": 1, "max": 0, "step": 0.2},
            {"min": 0, "max": 1, "step": 0},
            {"min": 0, "max": 1, "step": 2},
            {"min": "low", "max": 1, "step": 0.2},
        ],
    )
    def test_malformed(self, value):
        with pytest.raises(InvalidConfiguration, match="axis_range|min|max|step"):
            parse_axis_range(value)
