"""
Block-aware line rewriter for SRT files.

Each block is an index line, a timestamp line, caption lines and a blank
separator. Only the timestamp line of each block is rewritten; every other
line passes through untouched.
"""
from enum import Enum
from typing import Iterable, Iterator, List, Optional, TextIO, Tuple

from .dilation import Syncer
from .stamp import StampError, parse_fixed


START_OFFSET = 0;   # "HH:MM:SS,mmm --> HH:MM:SS,mmm"
END_OFFSET = 17;    #                   ^
ARROW = " --> ";

PREVIEW_LINES = 5;


class BlockState( Enum ):
    """Position inside the current subtitle block."""
    
    AWAITING_INDEX = 0;      # Start of file or just after a blank line
    AWAITING_TIMESTAMP = 1;  # Index line seen
    IN_CAPTION = 2;          # Timestamp line seen, caption text follows


def split_line_ending( line: str ) -> Tuple[str, str]:
    """Split a line into its content and its terminator ("" if none)."""
    content = line.rstrip( "\r\n" );
    return content, line[len( content ):];


class BlockScanner:
    """
    Tracks the position inside the current block, line by line.
    
    A blank line resets to AWAITING_INDEX; any other line moves one step
    forward. The line that moves AWAITING_TIMESTAMP to IN_CAPTION is the
    block's timestamp line.
    """
    
    def __init__( self ):
        self.state = BlockState.AWAITING_INDEX;
    
    def advance( self, line: str ) -> bool:
        """
        Consume one line and report whether it is a timestamp line.
        
        Args:
            line: Line as read, with or without its terminator
            
        Returns:
            True if the line is the timestamp line of its block
        """
        content, _ = split_line_ending( line );
        
        if not content:
            self.state = BlockState.AWAITING_INDEX;
            return False;
        
        if self.state is BlockState.AWAITING_INDEX:
            self.state = BlockState.AWAITING_TIMESTAMP;
            return False;
        
        if self.state is BlockState.AWAITING_TIMESTAMP:
            self.state = BlockState.IN_CAPTION;
            return True;
        
        return False;


class LineRewriter:
    """Rewrites timestamp lines through a Syncer and passes the rest through."""
    
    def __init__( self, syncer: Syncer ):
        self.syncer = syncer;
        self.scanner = BlockScanner();
        self.line_number = 0;
        self.rewritten = 0;
        self.preview: List[Tuple[str, str]] = [];  # First few (old, new) pairs
    
    def sync_timestamp_line( self, content: str ) -> str:
        start, end = self.syncer.sync(
            parse_fixed( content, START_OFFSET ),
            parse_fixed( content, END_OFFSET )
        );
        return f"{start}{ARROW}{end}";
    
    def rewrite_line( self, line: str ) -> str:
        """
        Rewrite one line if it is a timestamp line.
        
        Raises:
            StampError: If a timestamp line holds malformed stamps
        """
        self.line_number += 1;
        
        if not self.scanner.advance( line ):
            return line;
        
        content, ending = split_line_ending( line );
        if not ending:
            # Final line of the input without a terminator: left as is
            return line;
        
        try:
            new_content = self.sync_timestamp_line( content );
        except StampError as e:
            raise StampError( f"Line {self.line_number}: {e}" ) from e;
        
        self.rewritten += 1;
        if len( self.preview ) < PREVIEW_LINES:
            self.preview.append( ( content, new_content ) );
        
        return new_content + ending;
    
    def rewrite_lines( self, lines: Iterable[str] ) -> Iterator[str]:
        for line in lines:
            yield self.rewrite_line( line );


def rewrite_stream( infile: TextIO, outfile: Optional[TextIO], syncer: Syncer ) -> LineRewriter:
    """
    Copy infile to outfile, re-timing every block's timestamp line.
    
    Args:
        infile: Open SRT input
        outfile: Open output, or None to only scan (dry run)
        syncer: Transform applied to each timestamp pair
        
    Returns:
        The LineRewriter, for its counters and preview
    """
    rewriter = LineRewriter( syncer );
    
    for line in rewriter.rewrite_lines( infile ):
        if outfile is not None:
            outfile.write( line );
    
    return rewriter;
