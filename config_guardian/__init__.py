"""Config Guardian - detect drift in a directory of configuration files."""

__version__ = "0.1.0"
