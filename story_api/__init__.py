"""Story API: publish and update team-owned story bundles in object storage."""

__version__ = "1.0.0"
