"""
Built-in strategies.

Every class listed in ``__all__`` is registered with new contexts, so
``Builder().provider("developer")`` works out of the box.
"""

from .developer import Developer

__all__ = ["Developer"]
