"""Conversion of images into GameCube/Wii TPL texture files."""

__version__ = "0.1.7"