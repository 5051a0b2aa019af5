import json

import pytest

import run_missions
import run_random_missions


LAND = "3 1\n0 0 0\n1 0 1\n2 0 0\n"
TRAVEL = "0-0,1-0 1\n1-0,2-0 1\n"
MISSIONS = "1\n0 0\n2 0\n"


@pytest.fixture
def blocked_scenario(tmp_path):
    (tmp_path / "land.txt").write_text(LAND)
    (tmp_path / "travel.txt").write_text(TRAVEL)
    (tmp_path / "missions.txt").write_text(MISSIONS)
    return tmp_path


def cli_args(root, *extra):
    return [
        str(root / "land.txt"),
        str(root / "travel.txt"),
        str(root / "missions.txt"),
        str(root / "output.txt"),
        "--log-file",
        str(root / "logs" / "run.log"),
        *extra,
    ]


def test_transcript_and_summary(blocked_scenario, capsys) -> None:
    root = blocked_scenario
    stats = run_missions.main(cli_args(root, "--max-retries", "2", "--summary-json", str(root / "summary.json")))

    assert (root / "output.txt").read_text().splitlines() == ["Path is impassable!"] * 3
    assert stats["missions_abandoned"] == 1
    summary = json.loads((root / "summary.json").read_text())
    assert summary["stats"]["impassable_events"] == 3
    assert summary["path"] == [[0, 0]]
    assert "Objectives reached: 0/1" in capsys.readouterr().out


def test_strict_mode_still_writes_transcript(blocked_scenario) -> None:
    from dynpath.runner import UnreachableTargetError

    root = blocked_scenario
    with pytest.raises(UnreachableTargetError):
        run_missions.main(cli_args(root, "--max-retries", "0", "--strict"))
    assert (root / "output.txt").read_text() == "Path is impassable!\n"


def test_plot_saved(blocked_scenario) -> None:
    root = blocked_scenario
    (root / "land.txt").write_text("3 1\n0 0 0\n1 0 0\n2 0 0\n")
    run_missions.main(cli_args(root, "--plot", str(root / "path.png")))
    assert (root / "output.txt").read_text().splitlines() == [
        "Moving to 1-0",
        "Moving to 2-0",
        "Objective 1 reached!",
    ]
    assert (root / "path.png").stat().st_size > 0


def test_random_missions_export(tmp_path, capsys) -> None:
    out = tmp_path / "scenario"
    run_random_missions.main(
        ["--height", "10", "--width", "12", "--seed", "1", "--missions", "2", "--export", str(out), "--no-plot"]
    )
    for name in ("land.txt", "travel.txt", "missions.txt"):
        assert (out / name).exists()
    assert "Stats:" in capsys.readouterr().out
