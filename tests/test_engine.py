import numpy as np
import pytest

from evoloop.evolution.engine import GeneticAlgorithm, get_best
from evoloop.evolution.selectors import TournamentSelector
from evoloop.exceptions import EmptyPopulationError, EvolutionError


def _fail(*_args):
    raise AssertionError("operator must not be called")


class TestInitialPopulation:
    def test_generator_called_population_times(self, make_config):
        calls = []

        def agent():
            calls.append(1)
            return 0.0

        engine = GeneticAlgorithm(make_config(population=7, get_random_agent=agent))
        population = engine.initial_population()
        assert len(population) == 7
        assert len(calls) == 7

    def test_sequential_order(self, make_config):
        engine = GeneticAlgorithm(make_config(population=4))
        assert engine.initial_population() == [0.0, 1.0, 2.0, 3.0]


class TestRun:
    def test_population_size_is_constant(self, make_config):
        engine = GeneticAlgorithm(make_config(population=12, max_generation=8))
        generations = list(engine.evolve())
        assert len(generations) == 9
        assert all(len(g) == 12 for g in generations)

    def test_zero_generations_returns_initial_population(self, make_config):
        engine = GeneticAlgorithm(
            make_config(
                population=5,
                max_generation=0,
                f_fitness=_fail,
                f_mutate=_fail,
                f_offspring=_fail,
            )
        )
        assert engine.run() == [0.0, 1.0, 2.0, 3.0, 4.0]
        assert engine.metrics.total_generations == 0

    def test_exact_number_of_transitions(self, make_config):
        engine = GeneticAlgorithm(make_config(population=10, max_generation=5))
        engine.run()
        assert engine.metrics.total_generations == 5
        assert engine.metrics.fitness_evaluations == 50
        assert [s.generation for s in engine.metrics.history] == [0, 1, 2, 3, 4]

    def test_every_agent_mutated_when_pm_is_one(self, make_config):
        engine = GeneticAlgorithm(
            make_config(
                population=10,
                max_generation=1,
                pc=0.5,
                pm=1.0,
                get_random_agent=lambda: 123,
                f_fitness=lambda _a: 1.0,
                f_mutate=lambda a: a + 1,
                f_offspring=lambda a, b: (a + b) // 2,
            )
        )
        assert engine.run() == [124] * 10

    def test_no_crossover_when_pc_is_zero(self, make_config):
        engine = GeneticAlgorithm(make_config(pc=0.0, max_generation=10, f_offspring=_fail))
        engine.run()
        assert engine.metrics.crossovers == 0
        assert engine.metrics.copies == 100

    def test_no_mutation_when_pm_is_zero(self, make_config):
        engine = GeneticAlgorithm(make_config(pm=0.0, max_generation=10, f_mutate=_fail))
        engine.run()
        assert engine.metrics.mutations == 0

    def test_pure_copies_keep_parent_values(self, make_config):
        engine = GeneticAlgorithm(make_config(pc=0.0, pm=0.0))
        population = engine.initial_population()
        for _ in range(5):
            next_population = engine.step(population)
            assert set(next_population) <= set(population)
            population = next_population

    def test_every_slot_crossed_over_when_pc_is_one(self, make_config):
        engine = GeneticAlgorithm(
            make_config(
                pc=1.0,
                pm=0.0,
                f_fitness=lambda _a: 1.0,
                f_offspring=lambda _a, _b: "child",
            )
        )
        population = engine.step(engine.initial_population())
        assert population == ["child"] * 10
        assert engine.metrics.crossovers == 10

    @pytest.mark.parametrize("value", [1.0, 0.0, -2.5])
    def test_constant_fitness_completes(self, make_config, value):
        engine = GeneticAlgorithm(
            make_config(population=6, max_generation=4, f_fitness=lambda _a: value)
        )
        assert len(engine.run()) == 6

    def test_all_negative_fitness_completes(self, make_config):
        engine = GeneticAlgorithm(make_config(f_fitness=lambda a: -1.0 - a))
        assert len(engine.run()) == 10

    def test_seeded_runs_are_reproducible(self, make_config):
        first = GeneticAlgorithm(make_config(seed=7, max_generation=10)).run()
        second = GeneticAlgorithm(make_config(seed=7, max_generation=10)).run()
        assert first == second

    def test_injected_rng_takes_precedence(self, make_config):
        first = GeneticAlgorithm(make_config(seed=1), rng=np.random.default_rng(3)).run()
        second = GeneticAlgorithm(make_config(seed=2), rng=np.random.default_rng(3)).run()
        assert first == second

    def test_metrics_reset_between_runs(self, make_config):
        engine = GeneticAlgorithm(make_config(max_generation=3))
        engine.run()
        engine.run()
        assert engine.metrics.total_generations == 3
        assert len(engine.metrics.history) == 3


class TestStep:
    def test_input_population_untouched(self, make_config):
        engine = GeneticAlgorithm(
            make_config(
                pc=0.0,
                pm=0.0,
                get_random_agent=lambda: [1],
                f_fitness=lambda a: float(a[0]),
            )
        )
        population = engine.initial_population()
        snapshot = [list(a) for a in population]
        next_population = engine.step(population)
        for child in next_population:
            child.append(99)
        assert population == snapshot
        assert all(child is not parent for child in next_population for parent in population)

    def test_step_on_empty_population(self, make_config):
        with pytest.raises(EmptyPopulationError):
            GeneticAlgorithm(make_config()).step([])

    def test_step_preserves_input_length(self, make_config):
        engine = GeneticAlgorithm(make_config(population=10))
        assert len(engine.step([1.0, 2.0, 3.0])) == 3

    def test_evaluate_aligns_with_population(self, make_config):
        engine = GeneticAlgorithm(make_config(f_fitness=lambda a: a * 2))
        fitness = engine.evaluate([1.0, 3.0, 0.5])
        assert fitness.dtype == float
        assert fitness.tolist() == [2.0, 6.0, 1.0]
        assert engine.metrics.fitness_evaluations == 3

    def test_run_with_fitness_near_float_max(self, make_config):
        engine = GeneticAlgorithm(make_config(f_fitness=lambda a: 1e307 * (a + 1)))
        assert len(engine.run()) == 10

    def test_fitness_evaluated_once_per_agent(self, make_config):
        calls = []

        def fitness(a):
            calls.append(a)
            return a

        engine = GeneticAlgorithm(make_config(f_fitness=fitness))
        engine.step(engine.initial_population())
        assert len(calls) == 10

    def test_operator_errors_propagate(self, make_config):
        def boom(_a):
            raise RuntimeError("boom")

        engine = GeneticAlgorithm(make_config(f_fitness=boom))
        with pytest.raises(RuntimeError, match="boom"):
            engine.run()

    def test_generator_errors_propagate(self, make_config):
        def boom():
            raise KeyError("no agents")

        with pytest.raises(KeyError):
            GeneticAlgorithm(make_config(get_random_agent=boom)).run()


class TestElitism:
    def test_best_agent_survives_harmful_mutation(self, make_config):
        engine = GeneticAlgorithm(
            make_config(elitism=1, pc=0.0, pm=1.0, f_mutate=lambda a: a - 100.0)
        )
        population = engine.initial_population()
        next_population = engine.step(population)
        assert next_population[0] == max(population)
        assert max(next_population) == max(population)
        assert engine.metrics.elites_carried == 1

    def test_full_elitism_sorts_by_fitness(self, make_config):
        engine = GeneticAlgorithm(
            make_config(population=5, elitism=5, f_mutate=_fail, f_offspring=_fail)
        )
        assert engine.step([3.0, 9.0, 1.0, 9.0, 5.0]) == [9.0, 9.0, 5.0, 3.0, 1.0]

    def test_elitism_off_by_default(self, make_config):
        engine = GeneticAlgorithm(make_config())
        engine.run()
        assert engine.metrics.elites_carried == 0


class TestBest:
    def test_first_maximum_wins(self):
        assert get_best([3.0, 9.0, 9.0, 1.0, 5.0], lambda a: a) == 1

    def test_engine_get_best(self, make_config):
        engine = GeneticAlgorithm(make_config())
        assert engine.get_best([3.0, 9.0, 9.0, 1.0, 5.0]) == 1

    def test_best_agent(self, make_config):
        engine = GeneticAlgorithm(make_config(f_fitness=lambda a: -abs(a)))
        assert engine.best_agent([4.0, -0.5, 2.0]) == (1, -0.5, -0.5)

    def test_empty_population_is_an_error(self):
        with pytest.raises(EmptyPopulationError):
            get_best([], lambda a: a)

    def test_empty_population_error_family(self):
        with pytest.raises(EvolutionError):
            get_best([], lambda a: a)
        with pytest.raises(ValueError):
            get_best([], lambda a: a)

    def test_works_on_intermediate_generations(self, make_config):
        engine = GeneticAlgorithm(make_config(max_generation=3))
        for population in engine.evolve():
            index = engine.get_best(population)
            assert population[index] == max(population)


def test_tournament_selector_runs(make_config):
    engine = GeneticAlgorithm(make_config(parent_selector=TournamentSelector(3)))
    assert len(engine.run()) == 10
