"""relflow: resumable release workflow for a mobile app repository."""

__version__ = "0.1.0"
