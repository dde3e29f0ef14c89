# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""REST API for the calculation core.

FastAPI and uvicorn ship in the optional ``api`` extra, so the modules in
this package check for them before importing anything web-related.
"""


def check_dependency(package: str, install_hint: str, feature: str = "The REST API") -> None:
    """Fail with an install hint when *package* cannot be imported."""
    try:
        __import__(package)
    except ImportError:
        raise ImportError(
            f"{feature} requires '{package}'. Install with: {install_hint}"
        ) from None
