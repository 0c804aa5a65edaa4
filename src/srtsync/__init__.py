"""
srtsync - Subtitle re-timing utility.

Stretches an SRT file's timeline between two known points so its
captions line up with the movie.
"""

__version__ = "0.1.0";
__author__ = "srtsync Project";
__license__ = "MIT";
