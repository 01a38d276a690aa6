"""Priority-filtered message logging to a file or a TCP client."""

__version__ = "0.1.0"