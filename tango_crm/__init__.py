"""Tango CRM revenue growth API."""

__version__ = "0.1.0"
