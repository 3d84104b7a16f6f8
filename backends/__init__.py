"""
Backends - Collaborateurs API externes
"""

from backends.spotify_client import SpotifyClient

__all__ = ["SpotifyClient"]
