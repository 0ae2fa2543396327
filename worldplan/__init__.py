"""Deterministic world-content planner: outposts and resource baselines."""

__version__ = "0.1.0"
