import math

import numpy as np
import pytest

from AnnealTSP import (
    AnnealingConfig,
    AnnealingController,
    BestSolution,
    ConvergedError,
    InvalidConfiguration,
    InvalidInput,
    PointSet,
    RunState,
    Tour,
    make_history,
    step,
    total_energy,
)


@pytest.mark.parametrize(
    "overrides",
    [
        {"cooling_rate": 0.0},
        {"cooling_rate": 1.0},
        {"cooling_rate": 1.5},
        {"cooling_rate": -0.1},
        {"plateau_limit": 0},
        {"initial_temperature": 0.0},
        {"moves_per_sweep": 0},
        {"frozen_threshold": -1.0},
    ],
)
def test_invalid_configuration(unit_square, overrides):
    with pytest.raises(InvalidConfiguration):
        AnnealingController(unit_square, config=AnnealingConfig(**overrides))


def test_config_from_mapping():
    config = AnnealingConfig.from_mapping({"cooling_rate": 0.5, "plateau_limit": 3})
    assert config.cooling_rate == 0.5
    assert config.initial_temperature == 10.0
    assert config.sweep_length(7) == 49
    with pytest.raises(InvalidConfiguration):
        AnnealingConfig.from_mapping({"colling_rate": 0.5})


def test_tour_must_match_point_set(unit_square):
    with pytest.raises(InvalidInput):
        AnnealingController(unit_square, tour=[0, 1, 2])
    with pytest.raises(InvalidInput):
        AnnealingController(unit_square, tour=[0, 1, 1, 2])


def test_starts_from_identity_tour(unit_square):
    controller = AnnealingController(unit_square)
    assert controller.tour == [0, 1, 2, 3]
    assert controller.best.energy == pytest.approx(4.0)
    assert controller.state is RunState.RUNNING
    assert controller.temperature == 10.0


def test_improving_sweep_resets_plateau_and_keeps_temperature(unit_square, scripted_rng):
    tour = Tour([0, 2, 1, 3])
    best = BestSolution.from_tour(unit_square, tour)
    config = AnnealingConfig(moves_per_sweep=1)
    outcome = step(unit_square, tour, 0.0, best, 5, config=config, rng=scripted_rng(pairs=[(0, 2)]))
    assert outcome.plateau_counter == 0
    assert outcome.temperature == 0.0
    assert outcome.state is RunState.RUNNING
    assert outcome.accepted == 1
    assert best.energy == pytest.approx(4.0)
    assert best.tour == [0, 1, 2, 3]
    assert best.tour is not tour


def test_stagnant_sweep_cools_and_counts(unit_square, counting_rng):
    tour = Tour([0, 1, 2, 3])
    best = BestSolution(tour=tour.copy(), energy=0.0)
    config = AnnealingConfig(cooling_rate=0.5, plateau_limit=3)
    rng = counting_rng(seed=1)
    outcome = step(unit_square, tour, 8.0, best, 1, config=config, rng=rng)
    assert outcome.temperature == pytest.approx(4.0)
    assert outcome.plateau_counter == 2
    assert outcome.state is RunState.RUNNING
    assert rng.integer_calls == 16
    outcome = step(unit_square, tour, outcome.temperature, best, outcome.plateau_counter, config=config, rng=rng)
    assert outcome.state is RunState.CONVERGED
    assert best.energy == 0.0


def test_consecutive_sweeps_draw_fresh_pairs(random_points_30, counting_rng):
    tour = Tour(range(30))
    best = BestSolution.from_tour(random_points_30, tour)
    config = AnnealingConfig(seed=3, moves_per_sweep=5)
    rng = counting_rng(seed=3)
    first = step(random_points_30, tour, 10.0, best, 0, rng, config=config)
    step(random_points_30, tour, first.temperature, best, first.plateau_counter, rng, config=config)
    assert len(rng.drawn) == 10
    assert rng.drawn[:5] != rng.drawn[5:]


def test_step_requires_a_random_source(unit_square):
    tour = Tour(range(4))
    with pytest.raises(TypeError):
        step(unit_square, tour, 10.0, BestSolution.from_tour(unit_square, tour), 0)


def test_out_of_range_config_cannot_be_built():
    with pytest.raises(InvalidConfiguration):
        AnnealingConfig(cooling_rate=1.5)


def test_step_rejects_config_changed_out_of_range(unit_square):
    tour = Tour(range(4))
    best = BestSolution.from_tour(unit_square, tour)
    config = AnnealingConfig()
    config.cooling_rate = 1.5
    with pytest.raises(InvalidConfiguration):
        step(unit_square, tour, 10.0, best, 0, np.random.default_rng(0), config=config)
    assert tour == [0, 1, 2, 3]


def test_controller_sweeps_through_its_generator_and_criterion(unit_square, counting_rng):
    rng = counting_rng(seed=6)
    controller = AnnealingController(unit_square, config=AnnealingConfig(frozen_threshold=0.5), rng=rng)
    assert controller.moves.rng is rng
    assert controller.criterion.rng is rng
    assert controller.criterion.frozen_threshold == 0.5
    controller.step()
    assert rng.integer_calls == 16


def test_moves_per_sweep_is_tunable(random_points_30, counting_rng):
    rng = counting_rng(seed=2)
    controller = AnnealingController(random_points_30, config=AnnealingConfig(moves_per_sweep=7), rng=rng)
    controller.step()
    assert rng.integer_calls == 7


@pytest.mark.parametrize("limit", [1, 4, 7])
def test_converges_exactly_at_plateau_limit(two_points, limit):
    controller = AnnealingController(two_points, config=AnnealingConfig(plateau_limit=limit, seed=0))
    states = [controller.step().state for _ in range(limit)]
    assert states[:-1] == [RunState.RUNNING] * (limit - 1)
    assert states[-1] is RunState.CONVERGED
    assert controller.sweeps == limit
    assert controller.temperature == pytest.approx(10.0 * 0.99**limit)
    with pytest.raises(ConvergedError):
        controller.step()


def test_two_points_length_and_convergence(two_points):
    controller = AnnealingController(two_points, config=AnnealingConfig(seed=4))
    final = controller.run()
    assert final.state is RunState.CONVERGED
    assert final.sweep == 50
    assert controller.best.energy == pytest.approx(2 * 5.0)
    assert final.energy == pytest.approx(10.0)


def test_permutation_and_best_monotonicity(random_points_30):
    controller = AnnealingController(random_points_30, config=AnnealingConfig(seed=7))
    best_energies = [controller.best.energy]
    temperatures = [controller.temperature]
    for _ in range(15):
        if controller.converged:
            break
        controller.step()
        assert sorted(controller.tour) == list(range(30))
        assert sorted(controller.best.tour) == list(range(30))
        assert controller.best.tour is not controller.tour
        assert controller.best.energy == pytest.approx(total_energy(random_points_30, controller.best.tour))
        assert controller.energy >= controller.best.energy - 1e-9
        best_energies.append(controller.best.energy)
        temperatures.append(controller.temperature)
    assert all(b <= a for a, b in zip(best_energies, best_energies[1:]))
    assert all(b <= a for a, b in zip(temperatures, temperatures[1:]))


def test_unit_square_converges_to_optimum(unit_square):
    controller = AnnealingController(
        unit_square,
        config=AnnealingConfig(plateau_limit=50),
        tour=[0, 2, 1, 3],
        rng=np.random.default_rng(7),
    )
    assert controller.best.energy == pytest.approx(2 + 2 * math.sqrt(2))
    controller.run(max_sweeps=200)
    assert controller.converged
    assert controller.sweeps <= 200
    assert controller.best.energy == pytest.approx(4.0)
    assert total_energy(unit_square, controller.best.tour) == pytest.approx(4.0)


def test_iteration_yields_one_snapshot_per_sweep(two_points):
    history, cb = make_history()
    controller = AnnealingController(two_points, config=AnnealingConfig(plateau_limit=3), observers=[cb])
    snapshots = list(controller)
    assert [s.sweep for s in snapshots] == [1, 2, 3]
    assert snapshots[-1].state is RunState.CONVERGED
    assert history["sweep"] == [1, 2, 3]
    assert history["best_energy"] == pytest.approx([10.0, 10.0, 10.0])
    assert history["temperature"] == pytest.approx([9.9, 9.801, 9.70299])


def test_progress_bar_wraps_the_sweeps(two_points):
    controller = AnnealingController(two_points, config=AnnealingConfig(plateau_limit=3))
    snapshots = list(controller.with_progress_bar())
    assert [s.sweep for s in snapshots] == [1, 2, 3]
    assert controller.converged


def test_snapshot_is_detached(unit_square):
    controller = AnnealingController(unit_square, config=AnnealingConfig(seed=3))
    controller.step()
    snapshot = controller.snapshot()
    snapshot.tour.reverse()
    snapshot.best_tour.clear()
    assert sorted(controller.tour) == [0, 1, 2, 3]
    assert len(controller.best.tour) == 4


def test_run_respects_sweep_cap(random_points_30):
    controller = AnnealingController(random_points_30, config=AnnealingConfig(moves_per_sweep=10, seed=1))
    snapshot = controller.run(max_sweeps=3)
    assert snapshot.sweep == 3
    assert controller.sweeps == 3


def test_independent_runs_do_not_share_state():
    points = PointSet(np.random.default_rng(8).random((10, 2)))
    first = AnnealingController(points, config=AnnealingConfig(seed=1))
    second = AnnealingController(points, config=AnnealingConfig(seed=2))
    first.run(max_sweeps=5)
    assert second.tour == list(range(10))
    assert second.sweeps == 0
