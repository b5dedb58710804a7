"""cmsbase - headless CMS engine.

Tenant-isolated dynamic collections, typed columns and JSON documents
behind a FastAPI service.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
