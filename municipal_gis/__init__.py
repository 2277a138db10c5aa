"""Municipal GIS Viewer backend.

Loads municipal open-data feature collections (zoning, infrastructure,
demographics), normalises projected State Plane coordinates to WGS 84,
and reduces visible layers to weighted points for heatmap rendering.
"""

__version__ = "0.1.0"
