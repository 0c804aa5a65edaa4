"""
Linear time dilation between the subtitle file's timeline and the movie's.
"""
from dataclasses import dataclass
from typing import Tuple

from .stamp import Stamp


class DegenerateDilationError( ValueError ):
    """Raised when both file anchors point at the same time."""


@dataclass( frozen=True )
class DilationTransform:
    """Affine map from file time to movie time, in seconds."""
    
    dilation: float;         # Movie seconds per file second
    movie_start_sec: float;  # Movie time of the start anchor
    file_start_sec: float;   # File time of the start anchor
    
    def apply( self, file_sec: float ) -> float:
        return ( file_sec - self.file_start_sec ) * self.dilation + self.movie_start_sec;
    
    @property
    def offset( self ) -> float:
        """Movie time that file time 0 maps to."""
        return self.apply( 0.0 );


class Syncer:
    """
    Re-times (start, end) stamp pairs from the subtitle file onto the movie.
    
    One linear transform both re-bases each caption onto the movie timeline
    and stretches its on-screen duration by the same factor. Results that
    would fall before 00:00:00,000 are clamped to zero and counted.
    """
    
    def __init__( self, transform: DilationTransform ):
        self.transform = transform;
        self.clamped = 0;  # Stamps clamped at zero so far
    
    @property
    def dilation( self ) -> float:
        return self.transform.dilation;
    
    @property
    def offset( self ) -> float:
        return self.transform.offset;
    
    def _to_stamp( self, total_seconds: float ) -> Stamp:
        if total_seconds < 0:
            self.clamped += 1;
            total_seconds = 0.0;
        return Stamp.from_seconds( total_seconds );
    
    def sync( self, start: Stamp, end: Stamp ) -> Tuple[Stamp, Stamp]:
        """
        Map a caption's start and end stamps onto the movie timeline.
        
        Args:
            start: Caption start as found in the file
            end: Caption end as found in the file
            
        Returns:
            Tuple of (synced_start, synced_end)
        """
        start_sec = start.to_seconds();
        diff = end.to_seconds() - start_sec;
        
        synced_start = self.transform.apply( start_sec );
        synced_end = synced_start + diff * self.transform.dilation;
        
        return self._to_stamp( synced_start ), self._to_stamp( synced_end );


def make_syncer( movie_start: Stamp, movie_end: Stamp, file_start: Stamp, file_end: Stamp ) -> Syncer:
    """
    Build a Syncer from the four anchor stamps.
    
    Raises:
        DegenerateDilationError: If file_start and file_end are the same time
    """
    movie_start_sec = movie_start.to_seconds();
    file_start_sec = file_start.to_seconds();
    file_span = file_end.to_seconds() - file_start_sec;
    
    if file_span == 0:
        raise DegenerateDilationError(
            f"File start and end anchors are both {file_start}; cannot compute dilation"
        );
    
    dilation = ( movie_end.to_seconds() - movie_start_sec ) / file_span;
    return Syncer( DilationTransform( dilation, movie_start_sec, file_start_sec ) );
