"""
Version information for Fahrplan application.

Centralized version management for the application and its API integration.
"""

# Core application information
__version__ = "1.0.0"
__version_info__ = (1, 0, 0)
__app_name__ = "Fahrplan"
__app_display_name__ = "Fahrplan - Station Search & Departure Boards"
__company__ = "Fahrplan"
__copyright__ = "© 2025 Fahrplan contributors"
__description__ = "Desktop client for station search and departure boards"

# API information
__api_provider__ = "Deutsche Bahn Fahrplan API"
__api_url__ = "https://api.deutschebahn.com/freeplan/v1"

# License information
__license__ = "GPL v3"


def get_version_string() -> str:
    """Get formatted version string."""
    return f"{__app_name__} v{__version__}"


def get_user_agent() -> str:
    """Get the User-Agent header value sent with API requests."""
    return f"{__app_name__}/{__version__}"
