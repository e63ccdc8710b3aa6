"""Game domain services: rules, combat, fog of war, sessions and rooms.

This package contains the game engine that socket handlers and HTTP routes
call into, keeping transport concerns separated from core game mechanics.
Nothing in here imports Flask.
"""
