"""Mass-casualty-incident commander backend."""

__version__ = "1.0.0"
