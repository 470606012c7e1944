"""
Shared utilities for the Green-Acres CRM Lead Bridge.
"""
