"""Search scoop buckets aggregated from directories, archives, git repositories and HTML listings."""

__version__ = "0.1.0"
