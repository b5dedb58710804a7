"""Infrastructure layer for cmsbase."""
