"""A grid raycaster that plays .cub scene files, with XPM textures, doors and a minimap."""

__version__ = "0.1.0"