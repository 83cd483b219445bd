"""
Chromalab Colors Module

Color model and conversions, the palette generation engine with its
anti-repetition memory, and the image color-extraction pipeline.
"""

__version__ = "1.0.0"
