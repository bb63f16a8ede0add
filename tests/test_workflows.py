"""
Integration tests for mpc_track workflows and the command line interface.

These tests verify end-to-end functionality by combining multiple modules.
"""

import json
import math

import matplotlib.pyplot as plt
import numpy as np
import pytest

from mpc_track.cli import main
from mpc_track.config.query import TrackingQuery
from mpc_track.planning.trajectory import Trajectory
from mpc_track.plotting import plot_resampled
from mpc_track.workflows import run_query


@pytest.fixture
def diagonal_csv(tmp_path, diagonal_trajectory):
    return diagonal_trajectory.to_csv(tmp_path / "diagonal.csv")


@pytest.fixture
def query_yaml(tmp_path, diagonal_csv):
    path = tmp_path / "query.yaml"
    path.write_text(
        "query:\n"
        "  trajectory:\n"
        f"    path: {diagonal_csv.name}\n"
        "  horizon:\n"
        "    start: -0.5\n"
        "    dt: 0.5\n"
        "    n_steps: 6\n"
        "  pose:\n"
        "    x: -1.0\n"
        "    y: 0.0\n"
        f"    yaw: {math.pi / 4!r}\n"
    )
    return path


class TestRunQuery:
    """Tests for run_query."""

    def test_resample_and_nearest(self, tmp_path, query_yaml):
        query = TrackingQuery.from_yaml(query_yaml)

        result = run_query(query, base_path=tmp_path)

        resampled = result["resampled"]
        np.testing.assert_allclose(resampled.relative_time, [-0.5, 0.0, 0.5, 1.0, 1.5, 2.0])
        np.testing.assert_allclose(resampled.x, [0.0, 0.0, 0.5, 1.0, 1.5, 2.0])

        nearest = result["nearest"]
        assert nearest.index == 0
        assert nearest.nearest_time == pytest.approx(-0.5)
        assert nearest.min_dist_error == pytest.approx(math.sqrt(2.0) / 2.0)

        assert result["summary"]["n_source"] == 3
        assert result["summary"]["n_resampled"] == 6

    def test_brute_force_nearest(self, tmp_path, query_yaml):
        query = TrackingQuery.from_yaml(query_yaml)
        query.interpolate_nearest = False

        result = run_query(query, base_path=tmp_path)

        assert result["nearest"].nearest_time == 0.0
        assert result["nearest"].min_dist_error == pytest.approx(1.0)

    def test_writes_outputs(self, tmp_path, query_yaml):
        out_dir = tmp_path / "results"
        query = TrackingQuery.from_yaml(query_yaml)

        run_query(query, base_path=tmp_path, output_dir=out_dir)

        written = Trajectory.load(out_dir / "resampled.csv")
        assert written.size() == 6
        summary = json.loads((out_dir / "summary.json").read_text())
        assert summary["nearest"]["index"] == 0
        assert summary["horizon"][0] == pytest.approx(-0.5)

    def test_without_pose(self, tmp_path, diagonal_csv):
        query = TrackingQuery.from_dict({"trajectory": {"path": str(diagonal_csv)}})

        result = run_query(query)

        assert result["nearest"] is None
        assert result["summary"]["nearest"] is None


class TestPlotting:
    """Tests for the XY plot helper."""

    def test_plot_resampled(self, diagonal_trajectory):
        from mpc_track.planning.nearest import QueryPose, calc_nearest_pose_interp
        from mpc_track.planning.resample import resample_on_horizon

        resampled = resample_on_horizon(diagonal_trajectory, 0.0, 0.25, 9)
        nearest = calc_nearest_pose_interp(diagonal_trajectory, QueryPose(x=0.3, y=0.3))

        fig, ax = plot_resampled(diagonal_trajectory, resampled, nearest=nearest)

        labels = [line.get_label() for line in ax.get_lines()]
        assert labels == ["reference", "resampled", "nearest"]
        plt.close(fig)


class TestCli:
    """Tests for the command line entry point."""

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_info(self, capsys, diagonal_csv):
        assert main(["info", "--trajectory", str(diagonal_csv)]) == 0
        out = capsys.readouterr().out
        assert "Samples: 3" in out
        assert "Time strictly increasing: True" in out

    def test_info_missing_file(self, capsys, tmp_path):
        assert main(["info", "--trajectory", str(tmp_path / "missing.csv")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_resample_to_file(self, tmp_path, diagonal_csv):
        out = tmp_path / "out.csv"

        code = main([
            "resample", "--trajectory", str(diagonal_csv),
            "--dt", "0.5", "--steps", "5", "-o", str(out),
        ])

        assert code == 0
        traj = Trajectory.load(out)
        np.testing.assert_allclose(traj.relative_time, [0.0, 0.5, 1.0, 1.5, 2.0])
        np.testing.assert_allclose(traj.y, [0.0, 0.5, 1.0, 1.5, 2.0])

    def test_resample_to_stdout(self, capsys, diagonal_csv):
        assert main(["resample", "--trajectory", str(diagonal_csv), "--dt", "1.0", "--steps", "2"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[0] == "x,y,z,yaw,vx,k,relative_time"
        assert len(lines) == 3

    def test_resample_bad_step(self, capsys, diagonal_csv):
        code = main(["resample", "--trajectory", str(diagonal_csv), "--dt", "-1", "--steps", "2"])
        assert code == 1
        assert "Horizon step must be positive" in capsys.readouterr().err

    def test_nearest_interp(self, capsys, diagonal_csv):
        code = main([
            "nearest", "--trajectory", str(diagonal_csv),
            "--x", "0.3", "--y", "0.3", "--yaw", "0.785", "--interp",
        ])

        assert code == 0
        out = capsys.readouterr().out
        assert "Nearest index: 0" in out
        assert "Nearest time: 0.300000 s" in out

    def test_nearest_empty_trajectory(self, capsys, tmp_path):
        path = Trajectory().to_csv(tmp_path / "empty.csv")

        assert main(["nearest", "--trajectory", str(path), "--x", "0", "--y", "0"]) == 1
        assert "empty trajectory" in capsys.readouterr().err

    def test_run_with_plot(self, capsys, tmp_path, query_yaml):
        plot_path = tmp_path / "plot.png"
        out_dir = tmp_path / "results"

        code = main(["run", "--query", str(query_yaml), "-o", str(out_dir), "--plot", str(plot_path)])

        assert code == 0
        assert plot_path.exists()
        assert (out_dir / "summary.json").exists()
        assert "Nearest index: 0" in capsys.readouterr().out

    def test_info_zero_byte_csv(self, capsys, tmp_path):
        path = tmp_path / "blank.csv"
        path.write_text("")

        assert main(["info", "--trajectory", str(path)]) == 1
        assert "is empty" in capsys.readouterr().err

    def test_nearest_short_row_csv(self, capsys, tmp_path):
        path = tmp_path / "short.csv"
        path.write_text("x,y,z,yaw,vx,k,relative_time\n0,0,0,0,0,0\n")

        assert main(["nearest", "--trajectory", str(path), "--x", "0", "--y", "0"]) == 1
        assert "line 2" in capsys.readouterr().err

    def test_run_missing_query(self, capsys, tmp_path):
        assert main(["run", "--query", str(tmp_path / "nope.yaml")]) == 1
