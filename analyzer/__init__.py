"""
Elevator Bank Analyzer

Records the broker traffic of a run and turns it into summaries,
trajectory diagrams and JSON Lines logs.
"""

__version__ = "0.1.0"

from .statistics import Statistics

__all__ = ['Statistics']
