"""gen-cli: a command-line development assistant."""

__version__ = "0.1.0"
