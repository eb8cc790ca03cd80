"""Error raised when a scene, map or resource cannot be used."""

from __future__ import annotations


class CubError(Exception):
    """A problem with the scene file, the map or a resource that stops the game."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message