"""Supply Order System - factory consumables ordering and receiving."""

__version__ = "1.0.0"
