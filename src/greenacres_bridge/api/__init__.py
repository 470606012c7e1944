"""
API package for the Green-Acres CRM Lead Bridge.

This package contains the FastAPI webhook that receives lead notifications
over HTTP.
"""

from .api import app

__all__ = ["app"]
