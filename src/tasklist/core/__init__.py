"""Shared domain pieces: errors, ports (protocols) and client session state."""
