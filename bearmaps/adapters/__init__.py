"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- Map data storage (OSM XML files)
- Path search engines (A*)
"""
