"""Lambda adapter that runs an external ``bootstrap`` binary per invocation."""

__version__ = "0.1.0"
