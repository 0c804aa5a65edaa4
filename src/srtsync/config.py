"""
Configuration loaded from environment variables and an optional .env file.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_OUTPUT_SUFFIX = "_synced";
DEFAULT_ENCODING = "utf-8";
DEFAULT_MAX_BACKUPS = 10;


@dataclass
class Config:
    """
    Defaults for a synchronization run.
    
    Command line flags override these. The output naming rule lives here so
    callers (and tests) can swap it without touching the rewrite code.
    """
    
    output_suffix: str = DEFAULT_OUTPUT_SUFFIX;
    encoding: str = DEFAULT_ENCODING;
    backup_dir: Optional[Path] = None;   # None: "backup" next to the output file
    max_backups: int = DEFAULT_MAX_BACKUPS;
    log_dir: Optional[Path] = None;      # None: console logging only
    
    @classmethod
    def from_env( cls, env_file: Optional[Path] = None ) -> "Config":
        """
        Load configuration from the environment.
        
        Args:
            env_file: .env file to read first (defaults to ./.env if present)
            
        Returns:
            Config with environment overrides applied
        """
        env_file = Path( env_file ) if env_file else Path( ".env" );
        if env_file.exists():
            load_dotenv( env_file );
        
        backup_dir = os.getenv( "SRTSYNC_BACKUP_DIR" );
        log_dir = os.getenv( "SRTSYNC_LOG_DIR" );
        max_backups = os.getenv( "SRTSYNC_MAX_BACKUPS" );
        max_backups = int( max_backups ) if max_backups else DEFAULT_MAX_BACKUPS;
        if max_backups < 1:
            raise ValueError( f"SRTSYNC_MAX_BACKUPS must be at least 1, got {max_backups}" );
        
        return cls(
            output_suffix=os.getenv( "SRTSYNC_OUTPUT_SUFFIX", DEFAULT_OUTPUT_SUFFIX ),
            encoding=os.getenv( "SRTSYNC_ENCODING", DEFAULT_ENCODING ),
            backup_dir=Path( backup_dir ) if backup_dir else None,
            max_backups=max_backups,
            log_dir=Path( log_dir ) if log_dir else None
        );
    
    def output_path_for( self, input_path: Path ) -> Path:
        """Default output file: <stem><suffix><extension> beside the input."""
        input_path = Path( input_path );
        return input_path.with_name( f"{input_path.stem}{self.output_suffix}{input_path.suffix}" );
    
    def backup_dir_for( self, output_path: Path ) -> Path:
        return self.backup_dir if self.backup_dir else Path( output_path ).parent / "backup";
