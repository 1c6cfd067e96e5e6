"""hostdoctor: staged diagnostic checks for a host application."""

__version__ = "0.1.0"
