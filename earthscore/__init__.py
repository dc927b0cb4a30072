"""
EarthScore: point livability scores from Earth observation feeds.
"""

__version__ = "0.1.0"
