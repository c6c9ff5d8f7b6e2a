from __future__ import annotations

from evoloop.evolution.engine.config import GeneticConfig
from evoloop.evolution.engine.core import GeneticAlgorithm, get_best
from evoloop.evolution.engine.metrics import EngineMetrics, GenerationStats
