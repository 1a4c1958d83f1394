"""sizefit - encode images to a target file size."""

__version__ = "0.1.0"
