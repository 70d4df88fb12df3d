"""
Route Weather Trip Planner
==========================

Plans a trip between two places by sampling points along a straight-line
route, checking live weather at each point, and asking an AI assistant for
travel advice for the chosen date.

Author: Route Weather Trip Planner Team
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Route Weather Trip Planner Team"

def get_version():
    """Return the current version of the application"""
    return __version__

def get_info():
    """Return basic information about the application"""
    return {
        "name": "Route Weather Trip Planner",
        "version": __version__,
        "author": __author__,
        "description": "Weather-aware route sampling with AI trip advice"
    }
