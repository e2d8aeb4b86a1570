"""journal-writer: tails the systemd journal into rotating log files."""

__version__ = "0.1.0"
