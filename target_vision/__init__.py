"""Retroreflective target vision: find the two-stripe target, report center and distance"""

__version__ = "0.1.0"
