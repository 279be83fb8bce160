"""GuideForge: backend for authoring step-by-step instruction manuals."""

__version__ = "0.1.0"
