"""Offline single-player Battleship engine with a three-tier AI opponent."""

__version__ = "0.1.0"
