"""
app/repositories package marker.
"""

from app.repositories.hmis_csv_repository import HMISCSVRepository, HMISStoreError

__all__ = [
    "HMISCSVRepository",
    "HMISStoreError",
]
