"""State/store layer.

This package holds the keyed publish/subscribe store that fused feature
collections and UI selections flow through.
"""

from pyrsi.state.keys import StateKey, default_state
from pyrsi.state.store import Store, Subscriber

__all__ = ["StateKey", "Store", "Subscriber", "default_state"]
