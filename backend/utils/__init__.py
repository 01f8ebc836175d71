"""
Utility functions
"""
from .datetime_utils import neo4j_datetime_to_python, utc_now
from .preview import derive_preview, PREVIEW_LENGTH

__all__ = ['neo4j_datetime_to_python', 'utc_now', 'derive_preview', 'PREVIEW_LENGTH']
