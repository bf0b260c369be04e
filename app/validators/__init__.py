"""
app/validators package marker.
"""

from app.validators.hmis_validator import HMISPayloadError, HMISRecordValidator

__all__ = [
    "HMISPayloadError",
    "HMISRecordValidator",
]
