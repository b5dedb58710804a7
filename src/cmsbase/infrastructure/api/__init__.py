"""HTTP API for cmsbase."""
