"""Decorators for Result-returning callables."""

from pledge.decorators.safe import safe

__all__ = ['safe']
