"""
API integration for the Fahrplan application.

This module handles communication with the Fahrplan REST API,
including session lifetime, error handling, and response parsing.
"""

__all__ = []
