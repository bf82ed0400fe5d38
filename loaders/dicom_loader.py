"""
DICOM Series Loader

Reads a directory of single-frame DICOM slices into a VolumeGrid with its
calibration and initial window.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Callable, List, Optional, Tuple
import logging
import numpy as np

try:
    import pydicom
    from pydicom.errors import InvalidDicomError
    HAS_PYDICOM = True
except ImportError:
    HAS_PYDICOM = False

from core.base import BaseVolumeLoader, LoadedVolume
from mpr.volume import VolumeGrid


SUPPORTED_BITS_ALLOCATED = (8, 16)


def _first(value, default: Optional[float] = None) -> Optional[float]:
    """First entry of a possibly multi-valued numeric element."""
    if value is None or value == "":
        return default
    if isinstance(value, Sequence) and not isinstance(value, str):
        if len(value) == 0:
            return default
        value = value[0]
    return float(value)


class DicomSeriesLoader(BaseVolumeLoader):
    """
    Loader for a DICOM series stored as one file per slice.
    
    Slices are ordered by the z component of ImagePositionPatient, highest
    first, falling back to InstanceNumber when positions are missing.
    
    Attributes:
        force: Read files that lack the DICOM preamble
        progress_callback: Optional callback(progress: 0.0-1.0)
    """
    
    def __init__(
        self,
        force: bool = False,
        progress_callback: Optional[Callable[[float], None]] = None
    ):
        if not HAS_PYDICOM:
            raise ImportError(
                "pydicom is required for DICOM loading. "
                "Install it with: pip install pydicom"
            )
        self.force = force
        self.progress_callback = progress_callback
    
    def can_load(self, source: str) -> bool:
        path = Path(source)
        return path.is_dir() or path.suffix.lower() == ".dcm"
    
    def load(self, source: str) -> LoadedVolume:
        """
        Load a DICOM series.
        
        Args:
            source: Directory containing the slices (or a single file)
            
        Returns:
            LoadedVolume with grid, window and descriptive metadata
            
        Raises:
            FileNotFoundError: If the source does not exist
            ValueError: If no usable slices are found, slice shapes differ
                or the pixel format is unsupported
        """
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"DICOM source not found: {path}")
        
        files = sorted(p for p in path.iterdir() if p.is_file()) if path.is_dir() else [path]
        logging.info(f"Reading DICOM series from {path} ({len(files)} files)")
        
        datasets = []
        for i, file_path in enumerate(files):
            dataset = self._read(file_path)
            if dataset is not None:
                datasets.append(dataset)
            if self.progress_callback is not None:
                self.progress_callback((i + 1) / len(files) * 0.8)
        
        if not datasets:
            raise ValueError(f"No DICOM images found in {path}")
        
        datasets = self._sort_slices(datasets)
        first = datasets[0]
        
        bits_allocated = int(first.get("BitsAllocated", 0))
        if bits_allocated not in SUPPORTED_BITS_ALLOCATED:
            raise ValueError(f"Unsupported Bits Allocated: {bits_allocated}")
        
        rows, columns = int(first.Rows), int(first.Columns)
        slices = []
        for dataset in datasets:
            if (int(dataset.Rows), int(dataset.Columns)) != (rows, columns):
                raise ValueError(
                    f"Inconsistent slice shape {dataset.Rows}x{dataset.Columns}, "
                    f"expected {rows}x{columns}"
                )
            slices.append(np.asarray(dataset.pixel_array, dtype=np.float32))
        
        volume = np.stack(slices, axis=0)
        
        row_spacing, column_spacing = self._pixel_spacing(first)
        slice_thickness = _first(first.get("SliceThickness"), 1.0) or 1.0
        slice_spacing = self._slice_spacing(datasets, slice_thickness)
        rescale_slope = _first(first.get("RescaleSlope"), 1.0)
        rescale_intercept = _first(first.get("RescaleIntercept"), 0.0)
        
        grid = VolumeGrid.from_array(
            volume,
            voxel_spacing=(row_spacing, column_spacing, slice_spacing),
            slice_thickness=slice_thickness,
            slice_spacing=slice_spacing,
            rescale_slope=rescale_slope,
            rescale_intercept=rescale_intercept,
        )
        
        metadata = {
            "source": str(path),
            "patient_name": str(first.get("PatientName", "")),
            "series_description": str(first.get("SeriesDescription", "")),
            "modality": str(first.get("Modality", "")),
            "bits_allocated": bits_allocated,
        }
        
        if self.progress_callback is not None:
            self.progress_callback(1.0)
        
        logging.info(
            f"Loaded DICOM series: {grid.width}x{grid.height}x{grid.depth}, "
            f"spacing {row_spacing:.3f}/{column_spacing:.3f}/{slice_spacing:.3f} mm"
        )
        
        window_center = _first(first.get("WindowCenter"))
        window_width = _first(first.get("WindowWidth"))
        if window_center is None or window_width is None:
            logging.info("No stored window, using the value range")
            return LoadedVolume.with_default_window(grid, **metadata)
        
        return LoadedVolume(
            grid=grid,
            window_center=window_center,
            window_width=window_width,
            metadata=metadata,
        )
    
    def _read(self, file_path: Path):
        """Parse one file; returns None for non-DICOM files and non-image objects."""
        try:
            dataset = pydicom.dcmread(str(file_path), force=self.force)
        except InvalidDicomError:
            logging.debug(f"Skipping non-DICOM file: {file_path.name}")
            return None
        if "PixelData" not in dataset:
            logging.debug(f"Skipping DICOM without pixel data: {file_path.name}")
            return None
        return dataset
    
    @staticmethod
    def _z_position(dataset) -> Optional[float]:
        position = dataset.get("ImagePositionPatient")
        if position is None or len(position) < 3:
            return None
        return float(position[2])
    
    def _sort_slices(self, datasets: List) -> List:
        positions = [self._z_position(ds) for ds in datasets]
        if all(z is not None for z in positions):
            order = sorted(range(len(datasets)), key=lambda i: positions[i], reverse=True)
            return [datasets[i] for i in order]
        logging.warning("ImagePositionPatient missing, ordering slices by InstanceNumber")
        return sorted(datasets, key=lambda ds: int(ds.get("InstanceNumber", 0) or 0))
    
    def _slice_spacing(self, datasets: List, slice_thickness: float) -> float:
        positions = [self._z_position(ds) for ds in datasets]
        if len(datasets) > 1 and all(z is not None for z in positions):
            gaps = np.abs(np.diff(positions))
            gaps = gaps[gaps > 0]
            if gaps.size:
                return float(np.median(gaps))
        spacing = _first(datasets[0].get("SpacingBetweenSlices"))
        if spacing:
            return spacing
        return slice_thickness
    
    @staticmethod
    def _pixel_spacing(dataset) -> Tuple[float, float]:
        spacing = dataset.get("PixelSpacing")
        if spacing is None or len(spacing) < 2:
            return 1.0, 1.0
        return float(spacing[0]), float(spacing[1])
