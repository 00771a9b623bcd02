"""Simulation package.

Exposes the scenario runner and comparison runner at `memsim.simulation`
so callers can write `from memsim.simulation import Simulation`.
"""
from .comparison import ComparisonResult, ComparisonRunner
from .simulation import Simulation, generate_sequence

__all__ = ["ComparisonResult", "ComparisonRunner", "Simulation", "generate_sequence"]
