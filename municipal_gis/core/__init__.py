"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants for CRS codes, projection parameters, limits
- exceptions: Custom exception hierarchy
- projection: Read-only projection context and cached transformers
"""
