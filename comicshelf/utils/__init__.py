"""
Utility modules for comicshelf.
"""

from .async_utils import SupersedingRunner, run_async_safe

__all__ = ['SupersedingRunner', 'run_async_safe']
