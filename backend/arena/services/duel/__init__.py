"""Duel domain services: pairing, match lifecycle, Elo and timers.

This package holds the matchmaking and match-state logic that HTTP
routes and socket handlers call into, keeping transport concerns
separated from duel mechanics.
"""

from .engine import DuelEngine, build_engine, get_engine

__all__ = ['DuelEngine', 'build_engine', 'get_engine']
