"""HTTP backend exposing the /tasks resource."""

from tasklist.server.app import create_app

__all__ = ["create_app"]
