"""Personal time tracking: punch in, punch out, and summarize."""

__version__ = "0.4.0"
