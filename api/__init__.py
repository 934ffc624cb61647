"""
api - FastAPI re-exposition of the Steam Market Manager.

Provides RESTful API endpoints for:
- Single item price lookups
- Batch item price lookups
- The backpack.tf aggregate price list
"""

__version__ = "0.1.0"
