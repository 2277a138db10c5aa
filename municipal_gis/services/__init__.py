"""Application services composed from sources and geometry transforms."""
