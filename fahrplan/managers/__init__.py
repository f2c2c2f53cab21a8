"""
Managers for the Fahrplan application.
"""
