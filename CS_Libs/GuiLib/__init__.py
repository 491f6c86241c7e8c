"""
GuiLib - PyQt5 front end

This module provides the main window that renders the sorted grid and
forwards user input to a ColorSorterSession.
"""

from CS_Libs.GuiLib.color_sorter_window import ColorSorterWindow, ImageLabel

__all__ = [
    "ColorSorterWindow",
    "ImageLabel",
]
