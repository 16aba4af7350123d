"""dirty: find git repos with uncommitted, local-only or unpushed work."""

__version__ = "0.1.0"
