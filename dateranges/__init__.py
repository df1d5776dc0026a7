"""
dateranges - timezone-correct availability ranges from weekly rules and date overrides.
"""

__version__ = "0.1.0"
