"""Offline recording, playback and presets."""
