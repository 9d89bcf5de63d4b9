"""Test utilities for dataplatform applications.

    from dataplatform.testing import TestClient
"""

from dataplatform.testing.client import TestClient

__all__ = ["TestClient"]
