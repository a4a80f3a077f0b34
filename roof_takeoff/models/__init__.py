"""Data models and schemas.

Defines the data structures used throughout the takeoff engine:
- Vertex / RoofPolygon / FootprintGeometry: footprint geometry
- MeasurementSummary / ValidationResult: reported measurements and their check
- PackagingEntry / MaterialLine / MaterialDerivation: the bill of materials
- TakeoffReport: the persisted JSON report (see ``models.report``)
"""

from roof_takeoff.models._validation import ModelValidationError
from roof_takeoff.models.footprint import FootprintGeometry, RoofPolygon, Vertex
from roof_takeoff.models.materials import MaterialDerivation, MaterialLine, PackagingEntry
from roof_takeoff.models.measurement import MeasurementSummary, ValidationResult

__all__ = [
    "FootprintGeometry",
    "MaterialDerivation",
    "MaterialLine",
    "MeasurementSummary",
    "ModelValidationError",
    "PackagingEntry",
    "RoofPolygon",
    "ValidationResult",
    "Vertex",
]
