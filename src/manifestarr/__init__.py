"""Manifestarr - HLS manifest resolver for TMDB movies and episodes."""

__version__ = "0.1.0"
