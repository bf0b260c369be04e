"""
app/mappers package marker.
"""

from app.mappers.record_normalizer import FIELD_ALIASES, RecordNormalizer

__all__ = [
    "FIELD_ALIASES",
    "RecordNormalizer",
]
