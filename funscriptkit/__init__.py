"""Editing model for funscript motion scripts: actions, selection, undo, splines, heatmaps and helpers."""

__version__ = "0.1.0"

__all__ = [
    "action",
    "filelog",
    "funscript",
    "heatmap",
    "paths",
    "spline",
    "strokes",
    "undo",
    "util",
]