"""Roof takeoff engine.

Validates roof footprint geometry against independently measured linear
roof features and derives a priced bill of packaged materials, adjusted
for waste and brand packaging, plus a flat scalar table for document
formulas.
"""

__version__ = "0.1.0"
