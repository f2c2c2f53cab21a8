"""
Fahrplan desktop client

A PySide6 desktop application that searches stations and shows departure
boards from the Fahrplan REST API.

Features:
- Station search by name
- Departure board for a station at a chosen date and time
- Non-blocking requests with stale-result protection
"""

from version import __description__, __version__

__all__ = ["__description__", "__version__"]
