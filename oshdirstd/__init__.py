"""Rate and map project file listings against OSH directory standards loaded from CSV definitions."""

__version__ = "0.8.4"