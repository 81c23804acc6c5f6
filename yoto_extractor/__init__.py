"""
yoto-extractor: downloads a Yoto card's artwork, audio tracks, and icons into a
local folder together with plain-text metadata reports.
"""

__version__ = "1.0.0"
