"""A command-line DNS client: queries over UDP, TCP, TLS or HTTPS, with table, short and JSON output."""

__version__ = "0.2.1"