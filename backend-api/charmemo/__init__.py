"""
charmemo - character memo backend
"""

__version__ = "1.0.0"
