"""
Podcast chart rankings dashboard (Sweden / United States).
"""

__version__ = "1.0.0"
