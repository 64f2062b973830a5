"""
meetpoint - recommend meeting times and places from participant availability.
"""

__version__ = "0.1.0"
