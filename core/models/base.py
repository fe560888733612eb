"""
Declarative base shared by every model.

Defined next to the engine setup in core.db so metadata.create_all can be
called from there.
"""

from core.db import Base

__all__ = ["Base"]
