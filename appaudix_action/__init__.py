"""AppAudix security scan step for CI pipelines."""

__version__ = "1.0.0"
