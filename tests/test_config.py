import json

from ai import ReversiAI
from config import DEFAULT_CONFIG, load_config


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "nope.json"))
    assert cfg == DEFAULT_CONFIG
    cfg["depths"]["late"] = 3
    assert DEFAULT_CONFIG["depths"]["late"] == 12


def test_overrides_merge_nested_tables(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "variant": "enhanced",
        "depths": {"late": 10},
        "node_budgets": {"enhanced": 250000},
    }), encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg["variant"] == "enhanced"
    assert cfg["depths"] == {"early": 7, "mid": 8, "late": 10}
    assert cfg["node_budgets"] == {"basic": 100_000, "enhanced": 250_000}
    assert cfg["max_depth"] is None


def test_broken_json_falls_back(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    cfg = load_config(str(path))
    assert cfg == DEFAULT_CONFIG
    assert "using defaults" in caplog.text


def test_non_object_json_falls_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    assert load_config(str(path)) == DEFAULT_CONFIG


def test_engine_reads_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "variant": "enhanced",
        "depths": {"early": 5},
        "max_depth": 4,
    }), encoding="utf-8")
    player = ReversiAI(config_path=str(path))
    assert player.variant == "enhanced"
    assert player.search_engine.node_budget == 500_000
    assert player.search_engine.depths["early"] == 5
    assert player.search_engine.max_depth == 4


def test_explicit_arguments_beat_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"variant": "enhanced", "max_depth": 4}), encoding="utf-8")
    player = ReversiAI(variant="basic", max_depth=2, config_path=str(path))
    assert player.search_engine.node_budget == 100_000
    assert player.search_engine.max_depth == 2
