"""Repository layer: typed helpers over a StoreHandle.

Keep functions thin and focused, so services avoid building predicates by hand.
"""
from __future__ import annotations
