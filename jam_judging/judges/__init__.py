"""
Judge implementations.
"""

from .sim_judge import SimulatedJudge

__all__ = [
    "SimulatedJudge",
]
