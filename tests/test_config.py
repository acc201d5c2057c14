import json
from pathlib import Path

import pytest

from age_summary.config import RunConfig, build_config, load_config_file
from age_summary.errors import ConfigError


def test_defaults():
    cfg = build_config()
    assert cfg == RunConfig()
    assert cfg.pool_size == 3
    assert cfg.max_cycles == 10


def test_overrides_win_over_file_and_none_is_ignored():
    cfg = build_config({"pool_size": 5, "data_root": "csv"}, pool_size=7, data_root=None)
    assert cfg.pool_size == 7
    assert cfg.data_root == "csv"


def test_null_max_cycles_means_unbounded():
    assert build_config({"max_cycles": None}).max_cycles is None


def test_paths_are_coerced():
    cfg = build_config({"index_path": "lists/index.txt", "out_dir": "out"})
    assert cfg.index_path == Path("lists/index.txt")
    assert cfg.out_dir == Path("out")


@pytest.mark.parametrize(
    "settings",
    [
        {"pool_size": 0},
        {"max_cycles": 0},
        {"timeout_seconds": 0},
        {"deadline_seconds": -1},
        {"pool_size": "many"},
        {"colour": "blue"},
        {"debug": "false"},
        {"debug": 1},
    ],
)
def test_invalid_settings_raise_config_error(settings):
    with pytest.raises(ConfigError):
        build_config(settings)


def test_load_config_file_reads_run_section(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"run": {"pool_size": 4}}), encoding="utf-8")
    assert load_config_file(path) == {"pool_size": 4}


def test_load_config_file_errors(tmp_path):
    with pytest.raises(ConfigError):
        load_config_file(tmp_path / "missing.json")
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_file(bad)


def test_debug_accepts_only_booleans():
    assert build_config({"debug": True}).debug is True
    assert build_config({"debug": False}).debug is False
