"""RGB-D frames, pinhole camera models, serialization, messages, ROI points and transport selection."""

__version__ = "0.1.0"

__all__ = [
    "archive",
    "camera",
    "conversions",
    "image",
    "options",
    "roi",
    "serialization",
    "storage",
    "switching",
]