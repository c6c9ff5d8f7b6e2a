from datetime import datetime, timezone
import time

import hydra
from hydra.utils import get_object
from loguru import logger
from omegaconf import DictConfig, OmegaConf

from evoloop.evolution.engine import GeneticAlgorithm, GeneticConfig
from evoloop.evolution.selectors import build_parent_selector
from evoloop.utils.logger_setup import setup_logger


def build_config(cfg: DictConfig) -> GeneticConfig:
    """Resolve the problem operators and selector into a GeneticConfig."""
    ops = cfg.problem.operators
    return GeneticConfig(
        population=cfg.population,
        max_generation=cfg.max_generation,
        pc=cfg.pc,
        pm=cfg.pm,
        elitism=cfg.elitism,
        seed=cfg.seed,
        get_random_agent=get_object(ops.get_random_agent),
        f_fitness=get_object(ops.f_fitness),
        f_mutate=get_object(ops.f_mutate),
        f_offspring=get_object(ops.f_offspring),
        parent_selector=build_parent_selector(**OmegaConf.to_container(cfg.selector)),
    )


def run_experiment(cfg: DictConfig):
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("evoloop Genetic Algorithm Run")
    logger.info("=" * 80)
    logger.info(f"Problem: {cfg.problem.name}")
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")

    try:
        logger.info("Step 1/3: Building configuration...")
        if cfg.problem.operators.get("reseed"):
            get_object(cfg.problem.operators.reseed)(cfg.problem.seed)
        config = build_config(cfg)
        logger.info("Step 1/3: Complete")

        logger.info("Step 2/3: Evolving...")
        engine = GeneticAlgorithm(config)
        population = engine.run()
        logger.info(f"Step 2/3: Ran {engine.metrics.total_generations} generations")

        logger.info("Step 3/3: Selecting best agent...")
        index, agent, fitness = engine.best_agent(population)
        logger.info(f"Best agent #{index}: {agent!r} (fitness={fitness:.6g})")
        for stats in engine.metrics.history[-5:]:
            logger.info(
                f"  gen {stats.generation}: best={stats.best:.6g} mean={stats.mean:.6g} worst={stats.worst:.6g}"
            )
    except Exception as e:  # pylint: disable=broad-except
        logger.error(f"Run failed: {e}")
        raise
    finally:
        duration = time.time() - start_time
        logger.info(f"Total run duration: {duration:.2f} seconds")
        logger.info(f"End time: {datetime.now(timezone.utc).isoformat()}")
        logger.info("=" * 80)


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    output_dir = hydra.core.hydra_config.HydraConfig.get().runtime.output_dir
    log_file_path = setup_logger(cfg.logging, run_name=cfg.problem.name, output_dir=output_dir)
    logger.info("Run working directory: {}.", output_dir)
    logger.info(f"Log file: {log_file_path}")
    run_experiment(cfg)


if __name__ == "__main__":
    main()
