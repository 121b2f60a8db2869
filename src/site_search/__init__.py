"""Ranked multi-entity search for a content site."""
