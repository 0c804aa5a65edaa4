"""
CLI entry point for srtsync with argument parsing and validation.
"""
import argparse
import codecs
import sys
from pathlib import Path

from . import __version__
from .backup import BackupManager
from .config import Config
from .dilation import make_syncer
from .logging import setup_logging
from .stamp import StampError, parse_flexible
from .sync import SubtitleSynchronizer


# dest -> label used in messages
ANCHORS = (
    ( "movie_start", "movie start" ),
    ( "movie_end", "movie end" ),
    ( "file_start", "file start" ),
    ( "file_end", "file end" )
);


class SrtSyncCLI:
    """
    Command line interface for srtsync.
    
    Reads defaults from the environment (see Config), parses the anchor
    stamps and validates everything before any file is opened.
    """
    
    def __init__( self ):
        self.parser = self._create_parser();
        self.args = None;
        self.logger = None;
        self.config = None;
        self.anchors = {};
        self.output_file = None;
    
    def _create_parser( self ):
        """Create argument parser with all srtsync options."""
        parser = argparse.ArgumentParser(
            prog="srtsync",
            description="Re-time an SRT subtitle file by stretching it between two known points",
            epilog="Stamps are free-form: 1:02:03,450, 1.2.3.450 and '1 2 3 450' are the same time; "
                   "missing fields are 0, so 1:30 is one hour thirty minutes. "
                   "Environment variables: SRTSYNC_OUTPUT_SUFFIX, SRTSYNC_ENCODING, "
                   "SRTSYNC_BACKUP_DIR, SRTSYNC_MAX_BACKUPS, SRTSYNC_LOG_DIR"
        );
        
        parser.add_argument(
            "-i", "--input",
            required=True,
            type=Path,
            dest="input",
            help="Subtitle file to synchronize (.srt)"
        );
        
        parser.add_argument(
            "-o", "--output",
            type=Path,
            dest="output",
            help="Output file (default: <input>_synced.<ext> next to the input)"
        );
        
        # Anchors
        parser.add_argument(
            "-ms", "--movie-start",
            required=True,
            dest="movie_start",
            metavar="STAMP",
            help="Movie time where the first reference line is spoken"
        );
        
        parser.add_argument(
            "-me", "--movie-end",
            required=True,
            dest="movie_end",
            metavar="STAMP",
            help="Movie time where the second reference line is spoken"
        );
        
        parser.add_argument(
            "-fs", "--file-start",
            required=True,
            dest="file_start",
            metavar="STAMP",
            help="Subtitle file time of the first reference line"
        );
        
        parser.add_argument(
            "-fe", "--file-end",
            required=True,
            dest="file_end",
            metavar="STAMP",
            help="Subtitle file time of the second reference line"
        );
        
        # Optional parameters
        parser.add_argument(
            "--encoding",
            default=None,
            help="Text encoding of input and output (default: utf-8)"
        );
        
        parser.add_argument(
            "--log-dir",
            type=Path,
            default=None,
            help="Also write a rotating log file to this directory"
        );
        
        # Mode flags
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would change without writing the output file"
        );
        
        parser.add_argument(
            "--no-backup",
            action="store_true",
            help="Do not back up an existing output file before overwriting it"
        );
        
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug mode with verbose output"
        );
        
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        );
        
        return parser;
    
    def _load_config( self ):
        """Load environment configuration; returns a list of errors."""
        try:
            self.config = Config.from_env();
        except ValueError as e:
            self.config = Config();
            return [ f"Invalid environment configuration: {e}" ];
        return [];
    
    def _parse_anchors( self ):
        self.anchors = { dest: parse_flexible( getattr( self.args, dest ) ) for dest, _ in ANCHORS };
    
    def _validate_arguments( self ):
        """Validate parsed arguments; returns a list of error messages."""
        errors = [];
        
        if not self.args.input.exists():
            errors.append( f"Input file not found: {self.args.input}" );
        elif not self.args.input.is_file():
            errors.append( f"Input is not a file: {self.args.input}" );
        
        for dest, label in ANCHORS:
            if not self.anchors[dest].is_valid():
                errors.append(
                    f"Invalid {label} stamp '{getattr( self.args, dest )}': "
                    f"minutes and seconds must be 0-59, milliseconds 0-999"
                );
        
        if self.anchors["file_start"].to_seconds() == self.anchors["file_end"].to_seconds():
            errors.append( "File start and file end stamps must differ" );
        
        try:
            codecs.lookup( self.encoding );
        except LookupError:
            errors.append( f"Unknown encoding: {self.encoding}" );
        
        if not self.output_file.parent.is_dir():
            errors.append( f"Output directory not found: {self.output_file.parent}" );
        
        return errors;
    
    @property
    def encoding( self ):
        return self.args.encoding or self.config.encoding;
    
    def parse_args( self, argv=None ):
        """Parse command line arguments and validate configuration."""
        self.args = self.parser.parse_args( argv );
        
        errors = self._load_config();
        
        log_dir = self.args.log_dir or self.config.log_dir;
        try:
            self.logger = setup_logging( debug=self.args.debug, log_dir=log_dir );
        except OSError as e:
            # Fall back to the console so the error can still be reported
            self.logger = setup_logging( debug=self.args.debug );
            errors.append( f"Cannot use log directory {log_dir}: {e}" );
        
        self._parse_anchors();
        self.output_file = self.args.output or self.config.output_path_for( self.args.input );
        
        errors += self._validate_arguments();
        if errors:
            for error in errors:
                self.logger.error( f"Configuration error: {error}" );
            sys.exit( 1 );
        
        self.logger.debug( f"srtsync v{__version__} starting..." );
        for dest, label in ANCHORS:
            self.logger.debug( f"{label.capitalize()}: {self.anchors[dest]}" );
        
        return self.args;
    
    def create_backup_manager( self ):
        """Backup manager for the output file, or None when backups are off."""
        if self.args.no_backup or self.args.dry_run:
            return None;
        return BackupManager(
            self.config.backup_dir_for( self.output_file ),
            max_backups=self.config.max_backups
        );


def main( argv=None ):
    """Main entry point for the srtsync CLI."""
    cli = SrtSyncCLI();
    args = cli.parse_args( argv );
    
    synchronizer = SubtitleSynchronizer(
        input_file=args.input,
        output_file=cli.output_file,
        syncer=make_syncer( **cli.anchors ),
        encoding=cli.encoding,
        backup_manager=cli.create_backup_manager(),
        dry_run=args.dry_run
    );
    
    try:
        synchronizer.run();
        cli.logger.info( "Subtitle synchronization completed successfully!" );
    except StampError as e:
        cli.logger.error( f"Synchronization failed: {e}" );
        sys.exit( 1 );
    except UnicodeDecodeError as e:
        cli.logger.error( f"Cannot read {args.input} as {cli.encoding}: {e}" );
        sys.exit( 1 );
    except KeyboardInterrupt:
        cli.logger.warning( "Interrupted by user" );
        sys.exit( 130 );
    except Exception as e:
        cli.logger.error( f"Unexpected error: {e}" );
        if args.debug:
            raise;
        sys.exit( 1 );


if __name__ == "__main__":
    main();
