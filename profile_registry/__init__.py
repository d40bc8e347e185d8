"""Phoneme inventory registry for speech-alignment model profiles."""

__version__ = "1.0.0"
