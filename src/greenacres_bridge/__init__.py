#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Green-Acres CRM Lead Bridge.

Turns Green-Acres property inquiry notifications into structured leads and
forwards them to the CRM.
"""

__version__ = "1.0.0"
