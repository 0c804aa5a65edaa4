"""
Synchronization controller: runs the line rewriter over a whole SRT file.
"""
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .backup import BackupManager
from .dilation import Syncer
from .logging import get_logger
from .rewrite import LineRewriter, rewrite_stream


class SubtitleSynchronizer:
    """
    Re-times one subtitle file and writes the result.
    
    Steps:
    1. Rewrite every block's timestamp line into a temporary file
       next to the output
    2. Back up the existing output file, if any
    3. Move the temporary file into place
    
    A malformed timestamp stops the run before step 2, and the temporary
    file is removed, so no partial output is ever left behind. Line endings
    and all non-timestamp lines are copied unchanged.
    """
    
    def __init__(
        self,
        input_file: Path,
        output_file: Path,
        syncer: Syncer,
        encoding: str = "utf-8",
        backup_manager: Optional[BackupManager] = None,
        dry_run: bool = False
    ):
        self.input_file = Path( input_file );
        self.output_file = Path( output_file );
        self.syncer = syncer;
        self.encoding = encoding;
        self.backup_manager = backup_manager;
        self.dry_run = dry_run;
        
        self.logger = get_logger();
        self.rewriter: Optional[LineRewriter] = None;
    
    def _write_output( self ) -> LineRewriter:
        """Rewrite into a temp file in the output directory, then replace the output."""
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self.output_file.name}.",
            suffix=".tmp",
            dir=self.output_file.parent
        );

        try:
            with os.fdopen( fd, "w", encoding=self.encoding, newline="" ) as outfile, \
                 open( self.input_file, "r", encoding=self.encoding, newline="" ) as infile:
                rewriter = rewrite_stream( infile, outfile, self.syncer );
            
            if self.backup_manager and self.output_file.exists():
                self.backup_manager.create_backup( self.output_file );
            
            # mkstemp creates 0600; give the output the input's permissions
            shutil.copymode( self.input_file, temp_name );
            os.replace( temp_name, self.output_file );
        except BaseException:
            if os.path.exists( temp_name ):
                os.unlink( temp_name );
            raise;
        
        return rewriter;
    
    def _scan_only( self ) -> LineRewriter:
        with open( self.input_file, "r", encoding=self.encoding, newline="" ) as infile:
            return rewrite_stream( infile, None, self.syncer );
    
    def log_summary( self ):
        """Log what the run changed, with a short before/after preview."""
        rewriter = self.rewriter;
        
        self.logger.info( f"Dilation: {self.syncer.dilation:.6f}, offset at 0: {self.syncer.offset:+.3f}s" );
        self.logger.info( f"Re-timed {rewriter.rewritten} subtitle block(s) over {rewriter.line_number} line(s)" );
        
        if not self.dry_run:
            for old, new in rewriter.preview:
                self.logger.debug( f"  {old}  =>  {new}" );
        
        if self.syncer.clamped:
            self.logger.warning( f"{self.syncer.clamped} timestamp(s) fell before 00:00:00,000 and were clamped to zero" );
        
        if rewriter.rewritten == 0:
            self.logger.warning( "No timestamp lines found; is this an SRT file?" );
    
    def run( self ) -> bool:
        """
        Synchronize the input file.
        
        Returns:
            True on success
            
        Raises:
            StampError: If a timestamp line in the input is malformed
        """
        self.logger.info( f"Input: {self.input_file}" );
        
        if self.dry_run:
            self.logger.info( "Dry run: no file will be written" );
            self.rewriter = self._scan_only();
            for old, new in self.rewriter.preview:
                self.logger.info( f"  {old}  =>  {new}" );
        else:
            self.rewriter = self._write_output();
            self.logger.info( f"Output: {self.output_file}" );
        
        self.log_summary();
        return True;
