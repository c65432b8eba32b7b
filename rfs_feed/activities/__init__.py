"""Feed cleaning activities.

Each activity performs a single unit of work on the upstream documents:
- normalize_geometry: Flatten, filter, union and reduce a feature geometry
- clean_properties: Unpack and simplify a feature's properties
- clean_feed: Clean, explode, sort and rewind a whole FeatureCollection
- hazard_reduction: Convert the hazard reduction feed to GeoJSON
"""
