"""CLI command modules.

Command Groups:
- resources: list/get/delete/events/scale/restart through the API client
- nodes: node inspection
- term: interactive kubectl sessions in a terminal window
- secrets: OS credential store
"""

from .resources import (
    delete,
    events,
    get,
    kinds,
    list_resources,
    namespaces,
    nodes_app,
    restart,
    scale,
)
from .secrets import secrets_app
from .terminal import term_app

__all__ = [
    "delete",
    "events",
    "get",
    "kinds",
    "list_resources",
    "namespaces",
    "nodes_app",
    "restart",
    "scale",
    "secrets_app",
    "term_app",
]
