"""kubeintel: Kubernetes resource gateway and interactive terminal launcher."""

__version__ = "0.1.0"
