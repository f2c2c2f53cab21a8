"""
Data models for the Fahrplan application.
"""

from .fahrplan_data import Location, Departure

__all__ = ["Location", "Departure"]
