"""CloudStack operations for cluster infrastructure: offerings, affinity groups and isolated networks."""

__version__ = "0.1.0"