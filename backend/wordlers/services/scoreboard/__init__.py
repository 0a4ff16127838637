"""Scoreboard domain services: thread identity, day records and stats.

This package contains the pure(ish) domain logic imported by HTTP routes,
socket handlers and CLI commands, keeping transport concerns separated
from the game record rules.
"""
