"""Mini CRM backend: customers, tasks and role-gated access."""

__version__ = "1.0.0"

__all__ = ["__version__"]
