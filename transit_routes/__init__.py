"""
Transit route resolver

Resolves nested OpenStreetMap transit relations into one GeoJSON
MultiLineString feature per route.
"""

__version__ = "1.0.0"
