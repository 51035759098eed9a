"""Game domain services: board rules, room registry and cleanup timers.

This package contains pure(ish) domain logic that should be imported by
the protocol handlers, keeping transport concerns separated from core
game mechanics.
"""
