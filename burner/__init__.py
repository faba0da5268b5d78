"""
Subtitle Burner Service - Core Library

This package contains the core business logic for burning subtitles into
video: transcript segmentation, timing correction, style resolution,
SRT/ASS serialization and the asynchronous render job pipeline.
"""

__version__ = "1.0.0"
