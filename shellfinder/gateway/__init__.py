"""HTTP gateway for shellfinder."""

from shellfinder.gateway.routes import ROUTES, format_tree, json_errors

__all__ = ["ROUTES", "format_tree", "json_errors"]
