"""COLA label verification decision engine."""

__version__ = "1.0.0"
