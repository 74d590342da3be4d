import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from lorenzsim.cli.app import app


def test_simulate_json_summary():
    runner = CliRunner()
    result = runner.invoke(app, ["simulate", "--ticks", "10", "--json"])
    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary["length"] == 51
    assert summary["steps"] == 50
    assert summary["ticks"] == 10
    assert summary["capacity"] == 10_000
    assert summary["first"] == [0.1, 0.0, 0.0]
    assert summary["finite"] is True


def test_simulate_is_deterministic():
    runner = CliRunner()
    res1 = runner.invoke(app, ["simulate", "--ticks", "300", "--json"])
    res2 = runner.invoke(app, ["simulate", "--ticks", "300", "--json"])
    assert res1.exit_code == 0, res1.output
    assert res1.output == res2.output


def test_simulate_overrides_capacity():
    runner = CliRunner()
    result = runner.invoke(
        app, ["simulate", "--ticks", "100", "--capacity", "40", "--steps-per-tick", "2", "--json"]
    )
    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary["length"] == 40
    assert summary["steps"] == 200
    assert summary["first"] != [0.1, 0.0, 0.0]


def test_simulate_text_output():
    runner = CliRunner()
    result = runner.invoke(app, ["simulate", "--ticks", "2"])
    assert result.exit_code == 0, result.output
    assert "[run] command=simulate" in result.output
    assert "length=11 capacity=10000" in result.output
    assert "first=(0.100000,0.000000,0.000000)" in result.output


def test_simulate_with_config_file(tmp_path):
    cfg_path = Path(tmp_path) / "sim.yaml"
    cfg_path.write_text(yaml.safe_dump({"simulation": {"buffer_capacity": 8}}), encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(app, ["simulate", "--config", str(cfg_path), "--ticks", "5", "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["length"] == 8


def test_invalid_config_exits_nonzero(tmp_path):
    cfg_path = Path(tmp_path) / "sim.yaml"
    cfg_path.write_text("simulation:\n  buffer_capacity: 0\n", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(app, ["simulate", "--config", str(cfg_path)])
    assert result.exit_code == 1
    assert "Config error" in result.output


def test_invalid_override_exits_nonzero():
    runner = CliRunner()
    result = runner.invoke(app, ["simulate", "--time-step", "0"])
    assert result.exit_code == 1
    assert "time_step" in result.output


def test_check_finite_reports_divergence():
    runner = CliRunner()
    result = runner.invoke(app, ["simulate", "--ticks", "50", "--time-step", "5.0", "--check-finite"])
    assert result.exit_code == 1
    assert "Non-finite state" in result.output


def test_render_writes_png(tmp_path):
    out = Path(tmp_path) / "frame.png"
    runner = CliRunner()
    result = runner.invoke(app, ["render", "--ticks", "50", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()
    assert "Rendered 251 points" in result.output


def test_selftest_passes():
    runner = CliRunner()
    result = runner.invoke(app, ["selftest"])
    assert result.exit_code == 0, result.output
    assert "Selftest passed." in result.output
