"""
Decoding of NBT data into trees of Tags.

decode() reads one tag from a readable binary file-like object.
decodeBytes() and read() are conveniences for in-memory data and (optionally compressed) files.
"""
import gzip
import logging
import os
import zlib

from io import BytesIO

from nbtcodec.shared import (
    NBTFormatError, TooDeepError,
    TAG_END, TAG_LIST, TAG_COMPOUND,
    MAX_DEPTH,
    _B, _S, _I, _L, _F, _D,
    read as _r, readUnsignedByte as _rub, readString as _rst, readArrayHeader as _rah, readTagListHeader as _rlh,
    readInts as _ris, readLongs as _rls, assertValidTagType as _avtt
)
from nbtcodec.tag import Tag, END

LOG = logging.getLogger( __name__ )

def decode( i, forcedType=None, maxDepth=MAX_DEPTH ):
    """
    Reads a single tag from i, a readable binary file-like object, and returns it as a Tag.

    forcedType is None for a named tag: the tagType (1 byte) and, unless the tag is a TAG_End, the name are read from i first.
    Otherwise forcedType is the tagType to read, and only the payload is read from i. The returned tag's name is "".
    This is how the entries of a TAG_List are stored.

    maxDepth limits how deeply TAG_Lists and TAG_Compounds may nest. Defaults to MAX_DEPTH (512).

    Raises:
        TruncatedInputError  if i ends before the tag is complete.
        UnknownTagTypeError  if a tagType outside of [0,12] is read. No bytes after the offending tagType are consumed.
        InvalidUtf8Error     if a name or TAG_String isn't valid UTF-8.
        InvalidLengthError   if a TAG_List or array has a negative length.
        TooDeepError         if the tags are nested more than maxDepth levels deep.
    Any of these abort the entire decode; there is no partial result.
    """
    if forcedType is None:
        tagType = _rub( i )
        _avtt( tagType )
        if tagType == TAG_END:
            return END
        name = _rst( i )
    else:
        tagType = forcedType
        _avtt( tagType )
        name = ""
    return _readTag( i, tagType, name, 0, maxDepth )

def _readTag( i, tagType, name, depth, maxDepth ):
    """
    Reads the payload of a tag with the given tagType and returns the tag.
    TAG_Lists and TAG_Compounds are handled here rather than in TAG_READERS so each level of nesting costs a single stack frame.
    """
    if tagType == TAG_COMPOUND:
        if depth >= maxDepth:
            raise TooDeepError( maxDepth )
        children = []
        #Read named tags until we hit the TAG_End; the TAG_End itself isn't kept
        tt = _rub( i )
        while tt != TAG_END:
            _avtt( tt )
            children.append( _readTag( i, tt, _rst( i ), depth + 1, maxDepth ) )
            tt = _rub( i )
        return Tag( TAG_COMPOUND, name, tuple( children ) )

    elif tagType == TAG_LIST:
        if depth >= maxDepth:
            raise TooDeepError( maxDepth )
        tt, l = _rlh( i )
        entries = []
        for _ in range( l ):
            entries.append( _readTag( i, tt, "", depth + 1, maxDepth ) )
        return Tag( TAG_LIST, name, tuple( entries ), tt )

    elif tagType == TAG_END:
        return END

    return Tag( tagType, name, TAG_READERS[ tagType ]( i ) )

def readByte( i ):
    """Reads a TAG_Byte payload."""
    return _B.unpack( _r( i, 1 ) )[0]

def readShort( i ):
    """Reads a TAG_Short payload."""
    return _S.unpack( _r( i, 2 ) )[0]

def readInt( i ):
    """Reads a TAG_Int payload."""
    return _I.unpack( _r( i, 4 ) )[0]

def readLong( i ):
    """Reads a TAG_Long payload."""
    return _L.unpack( _r( i, 8 ) )[0]

def readFloat( i ):
    """Reads a TAG_Float payload."""
    return _F.unpack( _r( i, 4 ) )[0]

def readDouble( i ):
    """Reads a TAG_Double payload."""
    return _D.unpack( _r( i, 8 ) )[0]

def readByteArray( i ):
    """Reads a TAG_Byte_Array payload as bytes."""
    return _r( i, _rah( i ) )

def readIntArray( i ):
    """Reads a TAG_Int_Array payload as a tuple of ints."""
    return _ris( i, _rah( i ) )

def readLongArray( i ):
    """Reads a TAG_Long_Array payload as a tuple of ints."""
    return _rls( i, _rah( i ) )

#Functions (indexed by tag type) that read the payloads of leaf tags.
#TAG_End, TAG_List and TAG_Compound are handled by _readTag().
TAG_READERS = (
    None,           #TAG_END
    readByte,       #TAG_BYTE
    readShort,      #TAG_SHORT
    readInt,        #TAG_INT
    readLong,       #TAG_LONG
    readFloat,      #TAG_FLOAT
    readDouble,     #TAG_DOUBLE
    readByteArray,  #TAG_BYTE_ARRAY
    _rst,           #TAG_STRING
    None,           #TAG_LIST
    None,           #TAG_COMPOUND
    readIntArray,   #TAG_INT_ARRAY
    readLongArray   #TAG_LONG_ARRAY
)

def decodeBytes( data, maxDepth=MAX_DEPTH ):
    """
    Decodes a single named tag from data, a bytes-like object, and returns it.
    Raises NBTFormatError if data continues past the end of the tag.
    """
    i = BytesIO( data )
    tag = decode( i, None, maxDepth )
    extra = len( data ) - i.tell()
    if extra != 0:
        raise NBTFormatError( "{:d} unexpected byte{} after the end of the root tag.".format( extra, "s" if extra != 1 else "" ) )
    return tag

def read( source, compression="gzip", maxDepth=MAX_DEPTH ):
    """
    Decodes a single named tag from source and returns it.

    source can be the path of the file to read from (as a str or path-like object), or a readable binary file-like object containing uncompressed NBT data.
    compression is an optional parameter that can be None, "gzip", or "zlib". Defaults to "gzip".
        If source is a file-like object, this parameter is ignored; wrap the object in a gzip.GzipFile yourself if it is compressed.

    Raises NBTFormatError if the file's gzip or zlib container is corrupt, in addition to the errors decode() raises.
    """
    if not isinstance( source, ( str, os.PathLike ) ):
        return decode( source, None, maxDepth )

    LOG.debug( "Reading %s (compression=%s)", source, compression )
    try:
        if compression is None:
            file = open( source, "rb" )
        elif compression == "gzip":
            file = gzip.open( source, "rb" )
        elif compression == "zlib":
            with open( source, "rb" ) as hardfile:
                file = BytesIO( zlib.decompress( hardfile.read() ) )
        else:
            raise ValueError( "Unknown compression type \"{}\".".format( compression ) )
        with file:
            return decode( file, None, maxDepth )
    except NBTFormatError:
        raise
    #gzip raises a plain EOFError when the compressed stream itself is cut short
    except ( EOFError, zlib.error, gzip.BadGzipFile ) as e:
        raise NBTFormatError( "Corrupt {} data in \"{}\": {}".format( compression, os.fspath( source ), e ) ) from e
