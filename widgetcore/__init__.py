"""Rectangle packing, text-editing state with undo, and small rendering helpers."""

__version__ = "0.1.0"
__all__ = ["buffer", "fieldswapper", "pingpong", "rectpack", "textedit", "undo"]