"""Interface definitions for simulator components"""

from .car import ICar

__all__ = [
    'ICar',
]
