"""NSW RFS incident feed cleaner.

Turns the upstream major-incidents GeoJSON feed, whose geometry is
wrapped in nested GeometryCollections and split along artificial
borders, into a normalised feature collection ready for map rendering.
"""

__version__ = "0.1.0"
