"""Wellness platform backend API"""

__version__ = "1.0.0"
