"""
Subtitle timestamp value type with fixed-width and free-form parsers.
"""
import re
from dataclasses import dataclass


STAMP_WIDTH = 12;  # len( "HH:MM:SS,mmm" )

# Digit fields inside the fixed-width field; separators are not checked
FIXED_FIELDS = ( ( 0, 2 ), ( 3, 5 ), ( 6, 8 ), ( 9, 12 ) );

_DIGITS = re.compile( r'\d+', re.ASCII );
_NON_DIGITS = re.compile( r'\D+', re.ASCII );


class StampError( ValueError ):
    """Raised when text cannot be read as a timestamp."""


@dataclass( frozen=True )
class Stamp:
    """A point in time as hours, minutes, seconds and milliseconds."""
    
    hours: int = 0;
    minutes: int = 0;
    seconds: int = 0;
    milliseconds: int = 0;
    
    def to_seconds( self ) -> float:
        """Total time as a real number of seconds."""
        return self.hours * 3600 + self.minutes * 60 + self.seconds + self.milliseconds * 0.001;
    
    @classmethod
    def from_seconds( cls, total_seconds: float ) -> "Stamp":
        """
        Build a stamp from a seconds value.
        
        The value is rounded to the nearest whole millisecond first (ties to
        even, Python's round), then split into fields, so the milliseconds
        field never carries over to 1000.
        
        Args:
            total_seconds: Non-negative time in seconds
            
        Returns:
            Stamp for the rounded time
        """
        if total_seconds < 0:
            raise StampError( f"Negative time cannot be represented: {total_seconds}" );
        
        total_ms = round( total_seconds * 1000 );
        total_s, milliseconds = divmod( total_ms, 1000 );
        total_m, seconds = divmod( total_s, 60 );
        hours, minutes = divmod( total_m, 60 );
        
        return cls( hours, minutes, seconds, milliseconds );
    
    def is_valid( self ) -> bool:
        """Check field ranges; hours only needs to be non-negative."""
        return (
            self.hours >= 0 and
            0 <= self.minutes <= 59 and
            0 <= self.seconds <= 59 and
            0 <= self.milliseconds <= 999
        );
    
    def format( self ) -> str:
        """Canonical SRT form, e.g. 01:02:03,004."""
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d},{self.milliseconds:03d}";
    
    def __str__( self ):
        return self.format();


def parse_fixed( text: str, offset: int = 0 ) -> Stamp:
    """
    Read a fixed-width HH:MM:SS,mmm field from a larger line.
    
    Args:
        text: Line containing the field
        offset: Character position where the field starts
        
    Returns:
        Parsed Stamp
        
    Raises:
        StampError: If any digit field is missing or not numeric
    """
    field = text[offset:offset + STAMP_WIDTH];
    
    values = [];
    for start, end in FIXED_FIELDS:
        digits = field[start:end];
        if len( digits ) != end - start or not _DIGITS.fullmatch( digits ):
            raise StampError( f"Malformed timestamp at column {offset + 1}: {field!r}" );
        values.append( int( digits ) );
    
    return Stamp( *values );


def split_flexible( text: str ) -> list:
    """
    Split free-form stamp text into at most four digit tokens.
    
    Hours, minutes and seconds are the digit runs before each of the first
    three separators (any run of non-digits). Scanning stops once three
    separators are consumed or no separator is left. Milliseconds come from
    what follows the third separator, cut to three characters and stopped
    at the first non-digit.
    
    Args:
        text: Free-form stamp text, e.g. "1:30" or "0.0.5 250"
        
    Returns:
        List of 1-4 digit strings, possibly empty strings
    """
    tokens = [];
    rest = text;
    
    for _ in range( 3 ):
        separator = _NON_DIGITS.search( rest );
        if separator is None:
            tokens.append( rest );
            return tokens;
        
        tokens.append( rest[:separator.start()] );
        rest = rest[separator.end():];
    
    millis = _DIGITS.match( rest[:3] );
    tokens.append( millis.group( 0 ) if millis else "" );
    return tokens;


def parse_flexible( text: str ) -> Stamp:
    """
    Parse a stamp typed on the command line.
    
    Tokens map positionally to hours, minutes, seconds, milliseconds and
    missing ones are 0, so "1:30" is one hour thirty minutes. Never fails;
    range checking is left to Stamp.is_valid.
    """
    values = [ int( token ) if token else 0 for token in split_flexible( text ) ];
    values += [ 0 ] * ( 4 - len( values ) );
    return Stamp( *values );


def to_seconds( stamp: Stamp ) -> float:
    return stamp.to_seconds();


def from_seconds( total_seconds: float ) -> Stamp:
    return Stamp.from_seconds( total_seconds );


def format_stamp( stamp: Stamp ) -> str:
    return stamp.format();


def is_valid( stamp: Stamp ) -> bool:
    return stamp.is_valid();
