"""
Timestamped backups of output files that are about to be overwritten.
"""
import glob
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Tuple

from .logging import get_logger


class BackupManager:
    """
    Keeps ISO-8601 timestamped copies of files before they are replaced.
    
    Copies are named <stem>.<YYYY-MM-DDTHH-MM-SS><suffix>; only the newest
    max_backups copies of each file are kept.
    """
    
    def __init__( self, backup_dir: Path, max_backups: int = 10 ):
        if max_backups < 1:
            raise ValueError( f"max_backups must be at least 1, got {max_backups}" );
        
        self.logger = get_logger();
        self.backup_dir = Path( backup_dir );
        self.max_backups = max_backups;
    
    def get_backup_filename( self, original_file: Path ) -> str:
        """
        Backup name for a copy taken now.
        
        A second copy within the same second gets a -1, -2, ... counter so
        an earlier backup is never overwritten.
        """
        timestamp = datetime.now().isoformat().replace( ":", "-" ).split( "." )[0];  # Drop microseconds
        base = f"{original_file.stem}.{timestamp}";
        
        name = f"{base}{original_file.suffix}";
        counter = 1;
        while ( self.backup_dir / name ).exists():
            name = f"{base}-{counter}{original_file.suffix}";
            counter += 1;
        return name;
    
    def get_existing_backups( self, original_file: Path ) -> List[Tuple[Path, datetime, int]]:
        """
        Find existing backups of a file, oldest first.
        
        Args:
            original_file: File whose backups to list
            
        Returns:
            List of (backup_path, timestamp, counter) tuples
        """
        stem = original_file.stem;
        suffix = original_file.suffix;
        pattern = f"{glob.escape( stem )}.????-??-??T??-??-??*{glob.escape( suffix )}";
        
        backups = [];
        for backup_path in self.backup_dir.glob( pattern ):
            try:
                stamp = backup_path.name[len( stem ) + 1:len( backup_path.name ) - len( suffix )];
                date_part, time_part = stamp[:19].split( "T" );
                timestamp = datetime.fromisoformat( f"{date_part}T{time_part.replace( '-', ':' )}" );
                
                extra = stamp[19:];  # "" or "-N"
                if extra and not ( extra[0] == "-" and extra[1:].isdigit() ):
                    raise ValueError( f"unexpected text after timestamp: {extra!r}" );
                counter = int( extra[1:] ) if extra else 0;
                
                backups.append( ( backup_path, timestamp, counter ) );
            except ValueError as e:
                self.logger.debug( f"Skipping malformed backup file {backup_path}: {e}" );
        
        backups.sort( key=lambda x: ( x[1], x[2] ) );
        return backups;
    
    def apply_retention_policy( self, original_file: Path ):
        """Remove the oldest backups beyond max_backups."""
        backups = self.get_existing_backups( original_file );
        if len( backups ) <= self.max_backups:
            return;
        
        backups_to_remove = backups[:len( backups ) - self.max_backups];
        for backup_path, _, _ in backups_to_remove:
            try:
                backup_path.unlink();
                self.logger.debug( f"Removed old backup: {backup_path.name}" );
            except OSError as e:
                self.logger.warning( f"Could not remove backup {backup_path}: {e}" );
    
    def create_backup( self, file_path: Path ) -> Path:
        """
        Copy a file into the backup directory and prune old copies.
        
        Args:
            file_path: File about to be overwritten
            
        Returns:
            Path to the created backup
        """
        file_path = Path( file_path );
        if not file_path.exists():
            raise FileNotFoundError( f"File to backup not found: {file_path}" );
        
        self.backup_dir.mkdir( parents=True, exist_ok=True );
        backup_path = self.backup_dir / self.get_backup_filename( file_path );
        
        try:
            shutil.copy2( file_path, backup_path );
        except OSError as e:
            raise RuntimeError( f"Failed to create backup: {e}" ) from e;
        
        self.logger.info( f"Created backup: {backup_path}" );
        self.apply_retention_policy( file_path );
        return backup_path;
