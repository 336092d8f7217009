"""devctl — detect, import and export package-manager state across machines."""

__version__ = "0.1.0"
