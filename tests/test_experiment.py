"""
実験実行スクリプトのテスト
"""

import csv
import json

import pytest
import yaml

from aco_tour.experiment import build_positions, load_config, main, run_experiment
from aco_tour.utils.metrics import perimeter_by_angle


@pytest.fixture
def small_config():
    return {
        "experiment": {
            "name": "test",
            "batches": 2,
            "rounds_per_batch": 20,
            "report_interval": 5,
            "seed": 3,
        },
        "positions": {"source": "circle", "count": 8, "radius": 200},
        "colony": {
            "ant_count": 3,
            "max_pheromone_factor": 0.6,
            "pheromone_spread_forward": 0.01,
            "pheromone_spread_backward": 0.01,
            "pheromone_decay": 0.005,
        },
        "output": {"save_snapshots": True, "save_graphs": False},
    }


class TestBuildPositions:
    def test_circle(self, small_config):
        assert len(build_positions(small_config)) == 8

    def test_random(self, small_config):
        small_config["positions"] = {"source": "random", "count": 5}
        assert build_positions(small_config) == build_positions(small_config)

    def test_unknown_source(self, small_config):
        small_config["positions"]["source"] = "sphere"
        with pytest.raises(ValueError):
            build_positions(small_config)


class TestRunExperiment:
    def test_outputs(self, small_config, tmp_path):
        result = run_experiment(small_config, tmp_path)

        positions = build_positions(small_config)
        assert result["best_distance"] <= perimeter_by_angle(positions) * 1.05
        assert sorted(result["best_path"]) == sorted(p.name for p in positions)

        # 最初のバッチで必ず最良が更新される
        assert len(result["snapshots"]) >= 1
        data = json.loads(result["snapshots"][0].read_text(encoding="utf-8"))
        assert set(data) == {"distance", "stations"}
        assert len(data["stations"]) == 8

        with open(tmp_path / "convergence.csv", newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["batch", "round", "paths_generated", "shortest_path", "run_time_seconds"]
        # 1, 6, 11, 16, 20 ラウンド目 × 2バッチ
        assert len(rows) == 1 + 5 * 2

    def test_empty_sections_use_defaults(self, small_config, tmp_path):
        """空の colony / output セクション（YAMLでnull）はデフォルト扱い"""
        small_config["colony"] = None
        small_config["output"] = None
        small_config["experiment"]["batches"] = 1

        result = run_experiment(small_config, tmp_path)

        assert sorted(result["best_path"]) == sorted(p.name for p in build_positions(small_config))

    @pytest.mark.parametrize("key", ["batches", "rounds_per_batch"])
    def test_rejects_empty_loop(self, small_config, tmp_path, key):
        """バッチ数・ラウンド数は1以上"""
        small_config["experiment"][key] = 0
        with pytest.raises(ValueError):
            run_experiment(small_config, tmp_path)

    def test_graphs(self, small_config, tmp_path):
        small_config["output"]["save_graphs"] = True
        small_config["experiment"]["batches"] = 1
        run_experiment(small_config, tmp_path)

        assert (tmp_path / "best_tour.png").exists()
        assert (tmp_path / "convergence.png").exists()


class TestMain:
    def test_main(self, small_config, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump(small_config), encoding="utf-8")

        assert load_config(config_path) == small_config

        output_dir = tmp_path / "results"
        exit_code = main(
            ["--config", str(config_path), "--output-dir", str(output_dir), "--rounds", "5", "--no-graphs"]
        )

        assert exit_code == 0
        assert (output_dir / "convergence.csv").exists()
        assert list((output_dir / "paths").glob("best_path.*.json"))

    def test_main_positions_file(self, small_config, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump(small_config), encoding="utf-8")
        positions_path = tmp_path / "positions.csv"
        positions_path.write_text("A,0,0\nB,10,0\nC,10,10\n", encoding="utf-8")

        output_dir = tmp_path / "results"
        exit_code = main(
            [
                "--config", str(config_path),
                "--positions", str(positions_path),
                "--output-dir", str(output_dir),
                "--batches", "1",
                "--no-graphs",
            ]
        )

        assert exit_code == 0
        snapshot = next((output_dir / "paths").glob("best_path.*.json"))
        data = json.loads(snapshot.read_text(encoding="utf-8"))
        assert data["distance"] == pytest.approx(20 + 200**0.5)

    def test_main_unknown_positions_file(self, small_config, tmp_path):
        """未対応の位置ファイルは設定エラーとして終了コード2"""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump(small_config), encoding="utf-8")
        positions_path = tmp_path / "positions.txt"
        positions_path.write_text("A 0 0\n", encoding="utf-8")

        exit_code = main(
            ["--config", str(config_path), "--positions", str(positions_path), "--output-dir", str(tmp_path)]
        )

        assert exit_code == 2

    def test_main_zero_rounds(self, small_config, tmp_path):
        """ラウンド数0は設定エラーとして終了コード2"""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump(small_config), encoding="utf-8")

        exit_code = main(
            ["--config", str(config_path), "--rounds", "0", "--output-dir", str(tmp_path)]
        )

        assert exit_code == 2

    def test_main_empty_colony_section(self, tmp_path):
        """空の colony: キーでもデフォルト設定で実行できる"""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "experiment:\n  batches: 1\n  rounds_per_batch: 3\n  seed: 1\n"
            "positions:\n  source: circle\n  count: 6\n"
            "colony:\n"
            "output:\n",
            encoding="utf-8",
        )

        output_dir = tmp_path / "results"
        exit_code = main(["--config", str(config_path), "--output-dir", str(output_dir)])

        assert exit_code == 0
        assert (output_dir / "convergence.csv").exists()

    def test_main_invalid_config(self, small_config, tmp_path):
        small_config["colony"]["ant_count"] = 0
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump(small_config), encoding="utf-8")

        assert main(["--config", str(config_path), "--output-dir", str(tmp_path)]) == 2
