"""Continuum - brand-aware prompt synthesis and platform prediction engine."""

__version__ = "0.1.0"
