"""
CS_Libs - Color Sorter Library Modules

This package contains core functionality for the Color Sorter project,
organized into specialized sub-packages:

- ColorLib: HSL conversion, dominant color extraction and pixel sampling
- ImageLib: Image records, grid configuration and ingestion
- SortLib: Weight and hue ordering of image records
- GridLib: Grid geometry, compositing and export
- ProjStoreLib: Settings and weight persistence
- GuiLib: PyQt5 front end
"""

__version__ = "0.1.0"
