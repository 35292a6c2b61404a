import gzip
import math
import os
import shutil
import tempfile
import unittest
import zlib

from io import BytesIO

import nbtcodec

from nbtcodec import (
    TAG_END, TAG_BYTE, TAG_INT, TAG_LIST, TAG_COMPOUND,
    decode, decodeBytes,
    End, Byte, Short, Int, Long, Float, Double, ByteArray, String, List, Compound, IntArray, LongArray
)

#A named TAG_Compound "c" holding TAG_Byte "a" = 1 and TAG_Byte "b" = 2
COMPOUND = b"\x0a\x00\x01c" + b"\x01\x00\x01a\x01" + b"\x01\x00\x01b\x02" + b"\x00"

#A named TAG_List "l" of three TAG_Ints: 1, 2, 3
INT_LIST = b"\x09\x00\x01l" + b"\x03\x00\x00\x00\x03" + b"\x00\x00\x00\x01\x00\x00\x00\x02\x00\x00\x00\x03"

class TrickleReader:
    """A readable stream that never returns more than one byte per read() call."""
    def __init__( self, data ):
        self._i = BytesIO( data )
    def read( self, n=-1 ):
        return self._i.read( min( n, 1 ) if n >= 0 else 1 )

def nestedLists( n ):
    """Bytes for a named TAG_List holding a TAG_List holding a TAG_List... n levels below the root. The innermost list is empty."""
    return b"\x09\x00\x01l" + b"\x09\x00\x00\x00\x01" * n + b"\x00\x00\x00\x00\x00"

def nestedCompounds( n ):
    return b"\x0a\x00\x01c" * ( n + 1 ) + b"\x00" * ( n + 1 )

class TestDecode( unittest.TestCase ):
    def test_compoundTermination( self ):
        i = BytesIO( COMPOUND + b"\xff" )
        tag = decode( i )
        self.assertEqual( tag, Compound( "c", [ Byte( "a", 1 ), Byte( "b", 2 ) ] ) )
        self.assertEqual( len( tag ), 2 )
        #Stops right after the TAG_End
        self.assertEqual( i.tell(), len( COMPOUND ) )

    def test_listHasNoEntryHeaders( self ):
        i = BytesIO( INT_LIST )
        tag = decode( i )
        self.assertEqual( tag, List( "l", TAG_INT, [ 1, 2, 3 ] ) )
        self.assertEqual( tag.elementType, TAG_INT )
        self.assertEqual( i.tell(), 4 + 5 + 3*4 )
        for entry in tag:
            self.assertEqual( entry.name, "" )

    def test_emptyList( self ):
        tag = decodeBytes( b"\x09\x00\x01e\x00\x00\x00\x00\x00" )
        self.assertEqual( tag, List( "e", TAG_END ) )
        tag = decodeBytes( b"\x09\x00\x01e\x0a\x00\x00\x00\x00" )
        self.assertEqual( tag.elementType, TAG_COMPOUND )

    def test_end( self ):
        i = BytesIO( b"\x00\x00\x05" )
        self.assertIs( decode( i ), End() )
        self.assertEqual( i.tell(), 1 )

    def test_forcedType( self ):
        i = BytesIO( b"\x05\x00\x01x" )
        self.assertEqual( decode( i, TAG_BYTE ), Byte( "", 5 ) )
        self.assertEqual( i.tell(), 1 )
        self.assertEqual( decode( BytesIO( b"\x01\x00\x00\x00\x01\x07" ), TAG_LIST ), List( "", TAG_BYTE, [ 7 ] ) )
        self.assertIs( decode( BytesIO( b"" ), TAG_END ), End() )

    def test_scalars( self ):
        self.assertEqual( decodeBytes( b"\x01\x00\x01b\xff" ), Byte( "b", -1 ) )
        self.assertEqual( decodeBytes( b"\x02\x00\x01s\xfe\x0c" ), Short( "s", -500 ) )
        self.assertEqual( decodeBytes( b"\x03\x00\x01i\xff\xed\x29\x79" ), Int( "i", -1234567 ) )
        self.assertEqual( decodeBytes( b"\x04\x00\x01l\x80\x00\x00\x00\x00\x00\x00\x00" ), Long( "l", -9223372036854775808 ) )
        self.assertEqual( decodeBytes( b"\x05\x00\x01f\x3f\xc0\x00\x00" ), Float( "f", 1.5 ) )
        self.assertEqual( decodeBytes( b"\x06\x00\x01d\x40\x09\x21\xfb\x54\x44\x2d\x18" ), Double( "d", math.pi ) )
        self.assertEqual( decodeBytes( b"\x08\x00\x01s\x00\x03h\xc3\xa9" ), String( "s", "hé" ) )
        self.assertEqual( decodeBytes( b"\x08\x00\x00\x00\x00" ), String( "", "" ) )

    def test_arrays( self ):
        self.assertEqual( decodeBytes( b"\x07\x00\x01b\x00\x00\x00\x03\x00\x80\xff" ), ByteArray( "b", b"\x00\x80\xff" ) )
        self.assertEqual(
            decodeBytes( b"\x0b\x00\x01i\x00\x00\x00\x02\x00\x00\x00\x05\xff\xff\xff\xff" ),
            IntArray( "i", [ 5, -1 ] )
        )
        self.assertEqual(
            decodeBytes( b"\x0c\x00\x01l\x00\x00\x00\x01\xff\xff\xff\xff\xff\xff\xff\xfe" ),
            LongArray( "l", [ -2 ] )
        )
        self.assertEqual( decodeBytes( b"\x0c\x00\x01l\x00\x00\x00\x00" ), LongArray( "l" ) )

    def test_unicodeName( self ):
        self.assertEqual( decodeBytes( b"\x01\x00\x03\xe2\x82\xac\x01" ).name, "€" )

    def test_shortReads( self ):
        self.assertEqual( decode( TrickleReader( COMPOUND ) ), decodeBytes( COMPOUND ) )
        self.assertEqual( decode( TrickleReader( INT_LIST ) ), decodeBytes( INT_LIST ) )

    def test_trailingBytes( self ):
        with self.assertRaises( nbtcodec.NBTFormatError ):
            decodeBytes( COMPOUND + b"\x00" )

class TestDecodeErrors( unittest.TestCase ):
    def test_negativeLength( self ):
        for data in (
            b"\x07\x00\x01a\xff\xff\xff\xff",
            b"\x0b\x00\x01a\x80\x00\x00\x00",
            b"\x0c\x00\x01a\xff\xff\xff\xfe",
            b"\x09\x00\x01a\x03\xff\xff\xff\xff"
        ):
            with self.assertRaises( nbtcodec.InvalidLengthError ):
                decodeBytes( data )

    def test_nonEmptyEndList( self ):
        with self.assertRaises( nbtcodec.InvalidLengthError ):
            decodeBytes( b"\x09\x00\x01a\x00\x00\x00\x00\x02" )

    def test_truncated( self ):
        for data in (
            b"",
            b"\x02\x00\x01s\x00",
            b"\x03\x00\x01i\x00\x00\x00",
            b"\x04\x00\x01l\x00\x00\x00\x00\x00\x00\x00",
            b"\x05\x00\x01f\x00\x00\x00",
            b"\x07\x00\x01b\x00\x00\x00\x04\x01\x02\x03",
            b"\x08\x00\x01s\x00\x05abcd",
            b"\x0b\x00\x01i\x00\x00\x00\x02\x00\x00\x00\x01\x00\x00\x00",
            b"\x0c\x00\x01l\x00\x00\x00\x01\x00\x00\x00\x00\x00\x00\x00",
            b"\x01\x00\x05ab",
            INT_LIST[:-1],
            COMPOUND[:-1]
        ):
            with self.assertRaises( nbtcodec.TruncatedInputError ):
                decodeBytes( data )

    def test_truncatedIsEOFError( self ):
        with self.assertRaises( EOFError ):
            decodeBytes( b"\x03\x00\x01i\x00" )

    def test_hugeDeclaredLength( self ):
        #2147483647 bytes are declared, but only 3 exist
        with self.assertRaises( nbtcodec.TruncatedInputError ):
            decodeBytes( b"\x07\x00\x01b\x7f\xff\xff\xff\x01\x02\x03" )

    def test_invalidTagId( self ):
        i = BytesIO( b"\x0d\x00\x01x\x00" )
        with self.assertRaises( nbtcodec.UnknownTagTypeError ):
            decode( i )
        self.assertEqual( i.tell(), 1 )

    def test_invalidTagIdInContainers( self ):
        i = BytesIO( b"\x0a\x00\x01c\xff\x00\x01x" )
        with self.assertRaises( nbtcodec.UnknownTagTypeError ):
            decode( i )
        self.assertEqual( i.tell(), 5 )

        i = BytesIO( b"\x09\x00\x01l\x0d\x00\x00\x00\x01" )
        with self.assertRaises( nbtcodec.UnknownTagTypeError ):
            decode( i )
        self.assertEqual( i.tell(), 5 )

        with self.assertRaises( nbtcodec.UnknownTagTypeError ):
            decode( BytesIO( b"\x00" ), 13 )

    def test_invalidUtf8( self ):
        with self.assertRaises( nbtcodec.InvalidUtf8Error ):
            decodeBytes( b"\x08\x00\x01s\x00\x02\xff\xfe" )
        with self.assertRaises( nbtcodec.InvalidUtf8Error ) as cm:
            decodeBytes( b"\x01\x00\x01\xc3\x01" )
        self.assertIsInstance( cm.exception.__cause__, UnicodeDecodeError )

    def test_depthLimit( self ):
        self.assertEqual( decodeBytes( nestedLists( 9 ), maxDepth=10 ).tagType, TAG_LIST )
        with self.assertRaises( nbtcodec.TooDeepError ):
            decodeBytes( nestedLists( 10 ), maxDepth=10 )
        self.assertEqual( decodeBytes( nestedCompounds( 9 ), maxDepth=10 ).tagType, TAG_COMPOUND )
        with self.assertRaises( nbtcodec.TooDeepError ):
            decodeBytes( nestedCompounds( 10 ), maxDepth=10 )

    def test_defaultDepthLimit( self ):
        tag = decodeBytes( nestedLists( nbtcodec.MAX_DEPTH - 1 ) )
        self.assertEqual( tag.rget( *[ 0 ] * ( nbtcodec.MAX_DEPTH - 1 ) ), List( "", TAG_END ) )
        #Fails cleanly instead of exhausting the interpreter's stack
        with self.assertRaises( nbtcodec.TooDeepError ):
            decodeBytes( nestedLists( 5000 ) )
        with self.assertRaises( nbtcodec.TooDeepError ):
            decodeBytes( nestedCompounds( 5000 ) )

class TestRead( unittest.TestCase ):
    def setUp( self ):
        self.dir = tempfile.mkdtemp()
    def tearDown( self ):
        shutil.rmtree( self.dir )

    def _file( self, name, data ):
        path = os.path.join( self.dir, name )
        with open( path, "wb" ) as f:
            f.write( data )
        return path

    def test_compression( self ):
        expected = decodeBytes( COMPOUND )
        for name, data, compression in (
            ( "raw.nbt",  COMPOUND,                  None   ),
            ( "gzip.nbt", gzip.compress( COMPOUND ), "gzip" ),
            ( "zlib.nbt", zlib.compress( COMPOUND ), "zlib" )
        ):
            self.assertEqual( nbtcodec.read( self._file( name, data ), compression ), expected )

    def test_fileObject( self ):
        with open( self._file( "raw.nbt", COMPOUND ), "rb" ) as f:
            self.assertEqual( nbtcodec.read( f ), decodeBytes( COMPOUND ) )

    def test_unknownCompression( self ):
        with self.assertRaises( ValueError ):
            nbtcodec.read( self._file( "raw.nbt", COMPOUND ), "lzma" )

    def test_corruptContainer( self ):
        with self.assertRaises( nbtcodec.NBTFormatError ):
            nbtcodec.read( self._file( "bad.nbt", b"definitely not gzip" ), "gzip" )
        with self.assertRaises( nbtcodec.NBTFormatError ):
            nbtcodec.read( self._file( "bad.nbt", b"definitely not zlib" ), "zlib" )

    def test_notCompressed( self ):
        with self.assertRaises( nbtcodec.TruncatedInputError ):
            nbtcodec.read( self._file( "short.nbt", COMPOUND[:-1] ), None )

    def test_missingFile( self ):
        with self.assertRaises( FileNotFoundError ):
            nbtcodec.read( os.path.join( self.dir, "missing.nbt" ) )

if __name__ == "__main__":
    unittest.main()
