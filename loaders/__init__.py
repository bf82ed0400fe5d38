"""
Loaders Package

Contains volume data providers for different sources.
"""

from .dicom_loader import DicomSeriesLoader

__all__ = [
    'DicomSeriesLoader',
]
