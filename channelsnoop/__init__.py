"""Option parsing, certificate and system-proxy management, page scripts, console output and a CSV download log for WeChat Channels."""

__version__ = "1.2.0"