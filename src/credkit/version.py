"""Version information for credkit"""

__version__ = "0.1.0"
