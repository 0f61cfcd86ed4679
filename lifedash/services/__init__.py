"""
Business logic services
"""
from . import habits
from . import scheduler

__all__ = [
    'habits',
    'scheduler',
]
