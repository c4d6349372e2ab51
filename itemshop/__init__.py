"""Item shop services: configuration, models, MongoDB migrations and health-check HTTP servers."""

__version__ = "0.1.0"