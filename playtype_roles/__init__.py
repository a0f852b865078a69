"""
Offensive role clustering for NBA players from play type frequencies.
"""

__version__ = "0.1.0"
