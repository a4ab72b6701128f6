"""
API route modules.
"""

from harmonograph.api.routes import health, visual

__all__ = ["health", "visual"]
