"""
Text normalization, field extraction and reference matching for inbound
Green-Acres notifications.
"""
