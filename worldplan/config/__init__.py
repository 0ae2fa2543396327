"""
Configuration for planning runs.
"""

from .config import PlannerSettings, settings

__all__ = ['PlannerSettings', 'settings']
