"""
Encoding of Tags into NBT data.

encode() writes one tag to a writable binary file-like object using exactly the framing decode() expects.
encodeBytes() and write() are conveniences for in-memory data and (optionally compressed) files.
"""
import gzip
import logging
import os
import zlib

from io import BytesIO

from nbtcodec.shared import (
    TAG_END, TAG_LIST, TAG_COMPOUND,
    _UB, _TL, _B, _S, _I, _L, _F, _D,
    write as _w, encodeString as _est, packInts as _pis, packLongs as _pls
)

LOG = logging.getLogger( __name__ )

#Written after the last child of a TAG_Compound
_END = b"\0"

def encode( tag, o, suppressHeader=False ):
    """
    Writes tag to o, a writable binary file-like object.

    Unless suppressHeader is True, a named tag header (the tagType as 1 byte, then the name as a 2-byte length + UTF-8 bytes) is written before the payload.
    A header is never written for a tag with an empty name: an unnamed tag is written as just its payload, the way entries of a TAG_List are stored.
    Keep this in mind when encoding a root tag or TAG_Compound child with an empty name; decode() won't be able to tell where it starts.
    A TAG_End is always written as a single null byte.

    Raises StringTooLongError if a name or TAG_String is longer than 65535 bytes once encoded.
    Raises SinkWriteError if o fails to accept a write.
    """
    t = tag.tagType
    if t == TAG_END:
        _w( o, _END )
        return
    if not suppressHeader and tag.name:
        _w( o, _UB.pack( t ) + _est( tag.name ) )

    if t == TAG_COMPOUND:
        for child in tag.value:
            encode( child, o )
        _w( o, _END )
    elif t == TAG_LIST:
        _w( o, _TL.pack( tag.elementType, len( tag.value ) ) )
        for entry in tag.value:
            encode( entry, o, True )
    else:
        _w( o, TAG_PACKERS[t]( tag.value ) )

def packByteArray( v ):
    """Returns a framed TAG_Byte_Array payload."""
    return _I.pack( len( v ) ) + v

#Functions (indexed by tag type) that return the framed payloads of leaf tags as bytes.
#TAG_End, TAG_List and TAG_Compound are handled by encode().
TAG_PACKERS = (
    None,           #TAG_END
    _B.pack,        #TAG_BYTE
    _S.pack,        #TAG_SHORT
    _I.pack,        #TAG_INT
    _L.pack,        #TAG_LONG
    _F.pack,        #TAG_FLOAT
    _D.pack,        #TAG_DOUBLE
    packByteArray,  #TAG_BYTE_ARRAY
    _est,           #TAG_STRING
    None,           #TAG_LIST
    None,           #TAG_COMPOUND
    _pis,           #TAG_INT_ARRAY
    _pls            #TAG_LONG_ARRAY
)

def encodeBytes( tag, suppressHeader=False ):
    """Encodes tag and returns the result as bytes. See help( encode )."""
    with BytesIO() as o:
        encode( tag, o, suppressHeader )
        return o.getvalue()

def write( tag, target, compression="gzip" ):
    """
    Encodes tag and writes it to target.

    target can be the path of the file to write to (as a str or path-like object), or a writable binary file-like object.
    compression is an optional parameter that can be None, "gzip", or "zlib". Defaults to "gzip".
        If target is a writable file-like object, this parameter is ignored; bytes will be written to the file as if compression were None.
    """
    if not isinstance( target, ( str, os.PathLike ) ):
        encode( tag, target )
        return

    if compression not in ( None, "gzip", "zlib" ):
        raise ValueError( "Unknown compression type \"{}\".".format( compression ) )

    #Encoded in full before the target is opened; a failed encode leaves an existing file as it was.
    data = encodeBytes( tag )
    if compression == "gzip":
        data = gzip.compress( data )
    elif compression == "zlib":
        data = zlib.compress( data )
    with open( target, "wb" ) as file:
        _w( file, data )
    LOG.debug( "Wrote %s (compression=%s)", target, compression )
