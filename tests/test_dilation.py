"""
Test cases for the dilation transform and Syncer.
"""
import pytest
from pathlib import Path
import sys

# Add src directory to path for testing
sys.path.insert( 0, str( Path( __file__ ).parent.parent / "src" ) );

from srtsync.dilation import DegenerateDilationError, DilationTransform, Syncer, make_syncer
from srtsync.stamp import Stamp, from_seconds, parse_flexible


def stamp( text ):
    return parse_flexible( text );


class TestMakeSyncer:
    """Building the transform from four anchors."""
    
    def test_dilation_from_anchors( self ):
        syncer = make_syncer( stamp( "0:0:10" ), stamp( "0:1:10" ), stamp( "0:0:0" ), stamp( "0:0:30" ) );
        assert syncer.dilation == 2.0;
        assert syncer.transform.movie_start_sec == 10.0;
        assert syncer.transform.file_start_sec == 0.0;
    
    def test_offset_is_movie_time_of_file_zero( self ):
        syncer = make_syncer( stamp( "0:0:15" ), stamp( "0:0:25" ), stamp( "0:0:10" ), stamp( "0:0:20" ) );
        assert syncer.offset == pytest.approx( 5.0 );
    
    def test_equal_file_anchors_rejected( self ):
        with pytest.raises( DegenerateDilationError ):
            make_syncer( stamp( "0:0:10" ), stamp( "0:1:10" ), stamp( "0:0:30" ), stamp( "0:0:30" ) );
    
    def test_degenerate_error_is_value_error( self ):
        assert issubclass( DegenerateDilationError, ValueError );
    
    def test_equal_movie_anchors_allowed( self ):
        syncer = make_syncer( stamp( "0:0:10" ), stamp( "0:0:10" ), stamp( "0:0:0" ), stamp( "0:0:30" ) );
        assert syncer.dilation == 0.0;


class TestSync:
    """Re-timing (start, end) pairs."""
    
    def test_example_doubles_and_shifts( self ):
        syncer = make_syncer(
            stamp( "00:00:10,000" ), stamp( "00:01:10,000" ),
            stamp( "00:00:00,000" ), stamp( "00:00:30,000" )
        );
        start, end = syncer.sync( Stamp( 0, 0, 5, 0 ), Stamp( 0, 0, 7, 0 ) );
        assert start == Stamp( 0, 0, 20, 0 );
        assert end == Stamp( 0, 0, 24, 0 );
    
    @pytest.mark.parametrize( "a, b", [
        ( Stamp( 0, 0, 0, 0 ), Stamp( 0, 0, 1, 0 ) ),
        ( Stamp( 0, 12, 34, 567 ), Stamp( 0, 12, 38, 1 ) ),
        ( Stamp( 1, 59, 59, 999 ), Stamp( 2, 0, 2, 500 ) ),
        ( Stamp( 0, 0, 3, 0 ), Stamp( 0, 0, 1, 0 ) )
    ] )
    def test_identity_anchors_leave_pairs_unchanged( self, a, b ):
        syncer = make_syncer( stamp( "0:1:2,345" ), stamp( "1:30:0,5" ), stamp( "0:1:2,345" ), stamp( "1:30:0,5" ) );
        assert syncer.sync( a, b ) == ( a, b );
    
    def test_anchor_points_map_onto_movie_anchors( self ):
        movie_start, movie_end = stamp( "0:2:0,0" ), stamp( "1:45:30,0" );
        file_start, file_end = stamp( "0:1:40,0" ), stamp( "1:40:0,0" );
        syncer = make_syncer( movie_start, movie_end, file_start, file_end );
        
        start, end = syncer.sync( file_start, file_end );
        assert start == movie_start;
        assert end == movie_end;
    
    def test_affine_in_input_seconds( self ):
        # dilation 1.5
        syncer = make_syncer( stamp( "0:1:0" ), stamp( "0:1:30" ), stamp( "0:0:10" ), stamp( "0:0:30" ) );
        first, _ = syncer.sync( Stamp( 0, 0, 10, 0 ), Stamp( 0, 0, 10, 0 ) );
        second, _ = syncer.sync( Stamp( 0, 0, 20, 0 ), Stamp( 0, 0, 20, 0 ) );
        middle, _ = syncer.sync( Stamp( 0, 0, 15, 0 ), Stamp( 0, 0, 15, 0 ) );
        
        assert first == Stamp( 0, 1, 0, 0 );
        assert second == Stamp( 0, 1, 15, 0 );
        assert middle == Stamp( 0, 1, 7, 500 );
    
    def test_scaling_anchor_gap_scales_output_gap( self ):
        a, b = Stamp( 0, 0, 2, 0 ), Stamp( 0, 0, 5, 0 );
        
        base = make_syncer( stamp( "0:0:10" ), stamp( "0:0:20" ), stamp( "0:0:0" ), stamp( "0:0:10" ) );
        tripled = make_syncer( stamp( "0:0:10" ), stamp( "0:0:40" ), stamp( "0:0:0" ), stamp( "0:0:10" ) );
        
        base_start, base_end = base.sync( a, b );
        tripled_start, tripled_end = tripled.sync( a, b );
        
        base_gap = base_end.to_seconds() - base_start.to_seconds();
        tripled_gap = tripled_end.to_seconds() - tripled_start.to_seconds();
        assert tripled_gap == pytest.approx( 3 * base_gap );
        assert tripled_start == Stamp( 0, 0, 16, 0 );
        assert tripled_end == Stamp( 0, 0, 25, 0 );
    
    def test_duration_scaled_by_dilation( self ):
        syncer = make_syncer( stamp( "0:0:0" ), stamp( "0:0:5" ), stamp( "0:0:0" ), stamp( "0:0:10" ) );
        start, end = syncer.sync( Stamp( 0, 0, 4, 0 ), Stamp( 0, 0, 8, 0 ) );
        assert start == Stamp( 0, 0, 2, 0 );
        assert end == Stamp( 0, 0, 4, 0 );
    
    def test_results_before_zero_are_clamped( self ):
        syncer = make_syncer( stamp( "0:0:0" ), stamp( "0:0:10" ), stamp( "0:0:10" ), stamp( "0:0:20" ) );
        start, end = syncer.sync( Stamp( 0, 0, 5, 0 ), Stamp( 0, 0, 7, 0 ) );
        
        assert start == Stamp();
        assert end == Stamp();
        assert syncer.clamped == 2;
    
    def test_no_clamping_in_normal_use( self ):
        syncer = make_syncer( stamp( "0:0:10" ), stamp( "0:1:10" ), stamp( "0:0:0" ), stamp( "0:0:30" ) );
        syncer.sync( Stamp( 0, 0, 5, 0 ), Stamp( 0, 0, 7, 0 ) );
        assert syncer.clamped == 0;


class TestDilationTransform:
    
    def test_apply( self ):
        transform = DilationTransform( dilation=2.0, movie_start_sec=10.0, file_start_sec=5.0 );
        assert transform.apply( 5.0 ) == 10.0;
        assert transform.apply( 7.5 ) == 15.0;
        assert transform.offset == 0.0;
    
    def test_syncer_wraps_transform( self ):
        syncer = Syncer( DilationTransform( 1.0, 60.0, 0.0 ) );
        start, end = syncer.sync( from_seconds( 1.25 ), from_seconds( 2.0 ) );
        assert start == Stamp( 0, 1, 1, 250 );
        assert end == Stamp( 0, 1, 2, 0 );


if __name__ == '__main__':
    pytest.main( [ __file__ ] );
