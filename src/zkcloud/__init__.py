"""zkcloud - local cloud for zk proof workers."""

__version__ = "0.1.0"
