"""Export LXC container root filesystems with their identity mappings intact."""

from .__version__ import __version__


__all__ = ["__version__"]
