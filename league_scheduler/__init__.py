"""
League Season Schedule Engine.
Season generation, reconciliation and conflict detection for league divisions.
"""

__version__ = "1.0.0"
