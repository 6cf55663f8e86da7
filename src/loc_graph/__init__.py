"""loc-graph: commit activity measured in lines of code."""

__version__ = "0.1.0"
