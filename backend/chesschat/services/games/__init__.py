"""Game domain services: rules adapter, access guard, store and session.

This package contains the game state machine that should be called by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""
