import pytest

from dynpath.events import EventLog, Move, ObjectiveReached, PathImpassable, WizardChoice
from dynpath.memo import UnlockMemo
from dynpath.parsing import graph_from_type_grid
from dynpath.runner import MissionRunner, MissionRunnerConfig, UnreachableTargetError
from dynpath.types import NO_OPTION, PASSABLE, Mission


def run(graph, missions, **kwargs):
    log = EventLog()
    runner = MissionRunner(graph, missions, sink=log, **kwargs)
    runner.run()
    return runner, log.events


class TestBasicMovement:
    def test_corridor_walk(self) -> None:
        graph = graph_from_type_grid([[0, 0, 0]])
        missions = [Mission((0, 0), 1), Mission((2, 0), 1)]
        runner, events = run(graph, missions)
        assert events == [Move(1, 0), Move(2, 0), ObjectiveReached(1)]
        assert runner.path == [(0, 0), (1, 0), (2, 0)]

    def test_no_reveal_without_hidden_nodes(self) -> None:
        graph = graph_from_type_grid([[0, 0, 0]])
        run(graph, [Mission((0, 0), 1), Mission((2, 0), 1)])
        assert graph.unrevealed == 3

    def test_several_objectives(self) -> None:
        graph = graph_from_type_grid([[0, 0, 0]])
        missions = [Mission((0, 0), 1), Mission((2, 0), 1), Mission((0, 0), 1)]
        runner, events = run(graph, missions)
        assert events == [
            Move(1, 0),
            Move(2, 0),
            ObjectiveReached(1),
            Move(1, 0),
            Move(0, 0),
            ObjectiveReached(2),
        ]
        assert runner.stats()["objectives_reached"] == 2

    def test_target_at_current_position(self) -> None:
        graph = graph_from_type_grid([[0, 0]])
        _, events = run(graph, [Mission((0, 0), 1), Mission((0, 0), 1)])
        assert events == [ObjectiveReached(1)]

    def test_sink_receives_events_in_order(self) -> None:
        graph = graph_from_type_grid([[0, 0, 0]])
        seen = []
        runner = MissionRunner(graph, [Mission((0, 0), 1), Mission((2, 0), 1)], sink=seen.append)
        runner.run()
        assert seen == runner.events

    def test_requires_start(self) -> None:
        with pytest.raises(ValueError):
            MissionRunner(graph_from_type_grid([[0]]), [])


class TestImpassable:
    def test_blocked_corridor_never_reaches_objective(self) -> None:
        graph = graph_from_type_grid([[0, 1, 0]])
        runner, events = run(graph, [Mission((0, 0), 1), Mission((2, 0), 1)])
        assert PathImpassable() in events
        assert not any(isinstance(e, ObjectiveReached) for e in events)
        assert not any(isinstance(e, Move) for e in events)
        assert runner.stats()["missions_abandoned"] == 1

    def test_retry_bound(self) -> None:
        graph = graph_from_type_grid([[0, 1, 0]])
        config = MissionRunnerConfig(max_impassable_retries=3)
        _, events = run(graph, [Mission((0, 0), 1), Mission((2, 0), 1)], config=config)
        assert events == [PathImpassable()] * 4

    def test_strict_mode_raises(self) -> None:
        graph = graph_from_type_grid([[0, 1, 0]])
        config = MissionRunnerConfig(max_impassable_retries=0, abort_on_unreachable=True)
        runner = MissionRunner(graph, [Mission((0, 0), 1), Mission((2, 0), 1)], config=config)
        with pytest.raises(UnreachableTargetError) as exc:
            runner.run()
        assert exc.value.ordinal == 1
        assert exc.value.target == (2, 0)

    def test_abandoned_mission_continues_with_next(self) -> None:
        graph = graph_from_type_grid([[0, 0, 1, 0]])
        config = MissionRunnerConfig(max_impassable_retries=0)
        missions = [Mission((0, 0), 1), Mission((3, 0), 1, (5,)), Mission((1, 0), 1)]
        runner, events = run(graph, missions, config=config)
        assert events == [PathImpassable(), Move(1, 0), ObjectiveReached(2)]
        assert runner.wizard_choices == []


REPLAN_GRID = [
    [0, 0, 0, 5, 0],
    [0, 0, 0, 0, 0],
]


class TestReplanning:
    def test_revealed_gate_forces_detour(self) -> None:
        graph = graph_from_type_grid(REPLAN_GRID)
        _, events = run(graph, [Mission((0, 0), 1), Mission((4, 0), 1)])
        assert events == [
            Move(1, 0),
            Move(2, 0),
            PathImpassable(),
            Move(2, 1),
            Move(3, 1),
            Move(4, 1),
            Move(4, 0),
            ObjectiveReached(1),
        ]
        assert graph.node_at(3, 0).revealed
        assert graph.adjacency[graph.index_of(3, 0)] == []

    def test_incremental_reveal_matches_full_rescan(self) -> None:
        results = []
        for incremental in (True, False):
            graph = graph_from_type_grid(REPLAN_GRID)
            config = MissionRunnerConfig(incremental_reveal=incremental)
            runner, events = run(graph, [Mission((0, 0), 1), Mission((4, 0), 1)], config=config)
            results.append((events, graph.revealed_mask().tolist(), graph.unrevealed))
        assert results[0] == results[1]

    def test_incremental_reveal_on_larger_map(self) -> None:
        grid = [
            [0, 0, 0, 0, 0, 0, 0],
            [0, 1, 1, 3, 1, 1, 0],
            [0, 0, 0, 0, 0, 0, 0],
            [0, 2, 1, 1, 1, 2, 0],
            [0, 0, 0, 0, 0, 0, 0],
        ]
        missions = [Mission((3, 0), 2), Mission((3, 4), 2), Mission((0, 0), 2)]
        outcomes = []
        for incremental in (True, False):
            graph = graph_from_type_grid(grid)
            config = MissionRunnerConfig(incremental_reveal=incremental)
            _, events = run(graph, missions, config=config)
            outcomes.append((events, graph.revealed_mask().tolist()))
        assert outcomes[0] == outcomes[1]
        assert outcomes[0][0].count(ObjectiveReached(1)) == 1
        assert outcomes[0][0].count(ObjectiveReached(2)) == 1


def gated_missions():
    return [
        Mission((0, 0), 5),
        Mission((1, 0), 5, (7, 8)),
        Mission((4, 0), 5),
    ]


class TestWizardChoice:
    def test_chooses_shorter_unlock(self, gated_corridors) -> None:
        runner, events = run(gated_corridors, gated_missions())
        assert events == [
            Move(1, 0),
            ObjectiveReached(1),
            WizardChoice(8),
            Move(2, 0),
            Move(3, 0),
            Move(4, 0),
            ObjectiveReached(2),
        ]
        g = gated_corridors
        for pos in [(2, 0), (3, 0)]:
            idx = g.index_of(*pos)
            assert g.node_at(*pos).baseline_type == PASSABLE
            assert g.adjacency[idx] == g.original_adjacency[idx]
        for pos in [(2, 1), (3, 1)]:
            assert g.node_at(*pos).baseline_type == 7
            assert g.adjacency[g.index_of(*pos)] == []
        assert 8 in runner.memo
        assert runner.wizard_choices == [8]

    def test_no_choice_after_last_mission(self, gated_corridors) -> None:
        missions = [Mission((0, 0), 5), Mission((1, 0), 5, (7, 8))]
        _, events = run(gated_corridors, missions)
        assert not any(isinstance(e, WizardChoice) for e in events)

    def test_memo_prevents_reapplying(self, gated_corridors) -> None:
        missions = gated_missions()[:2] + [
            Mission((4, 0), 5, (8,)),
            Mission((1, 0), 5),
        ]
        runner, events = run(gated_corridors, missions)
        choices = [e for e in events if isinstance(e, WizardChoice)]
        assert choices == [WizardChoice(8), WizardChoice(NO_OPTION)]
        assert events[-1] == ObjectiveReached(3)
        assert runner.stats()["unlocked_codes"] == 1

    def test_preloaded_memo(self, gated_corridors) -> None:
        _, events = run(gated_corridors, gated_missions(), memo=UnlockMemo([8]))
        assert WizardChoice(7) in events
        assert events[-1] == ObjectiveReached(2)
        assert gated_corridors.node_at(2, 1).baseline_type == PASSABLE
        assert gated_corridors.node_at(2, 0).baseline_type == 8

    def test_no_option_leaves_graph_untouched(self, gated_corridors) -> None:
        missions = [
            Mission((0, 0), 5),
            Mission((1, 0), 5, (9,)),
            Mission((4, 0), 5),
        ]
        config = MissionRunnerConfig(max_impassable_retries=1)
        runner, events = run(gated_corridors, missions, config=config)
        assert events[:3] == [Move(1, 0), ObjectiveReached(1), WizardChoice(NO_OPTION)]
        assert events[3:] == [PathImpassable(), PathImpassable()]
        assert len(runner.memo) == 0
