"""
User interface components for the Fahrplan application.
"""
