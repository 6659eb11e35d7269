# =============================================================================
# Employee Sync Main Package - Dynamic Version Loading
# =============================================================================
"""
Employee Sync - keeps the derived checklist views of the hub in step with the
HR system of record through broker-delivered employee events.

Version is loaded from installed package metadata (pyproject.toml).
"""

from __future__ import annotations


def _get_version() -> str:
    """
    Get package version from installed metadata.

    Returns:
        Version string (e.g., "0.3.0")
    """
    from importlib.metadata import version, PackageNotFoundError

    try:
        return version("employee-sync")
    except PackageNotFoundError:
        # Running from a source checkout without installation
        return "0.0.0-dev"


__version__: str = _get_version()
__description__: str = "Employee Sync - event-driven checklist views for HR data"

__all__ = [
    "__version__",
    "__description__",
]
