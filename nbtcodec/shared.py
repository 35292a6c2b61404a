from struct import Struct

#Tag Types
#A TAG_End is a nameless tag that terminates TAG_Compound and is the element type of an empty TAG_List.
#It has no payload, and when written on its own it is simply b"\0".
TAG_END        = 0
TAG_BYTE       = 1  #A TAG_Byte payload stores a 1-byte signed integer.
TAG_SHORT      = 2  #A TAG_Short payload stores a 2-byte big-endian signed integer.
TAG_INT        = 3  #A TAG_Int payload stores a 4-byte big-endian signed integer.
TAG_LONG       = 4  #A TAG_Long payload stores an 8-byte big-endian signed integer.
TAG_FLOAT      = 5  #A TAG_Float payload stores a big-endian float (a 4-byte IEEE 754-2008, aka binary32).
TAG_DOUBLE     = 6  #A TAG_Double payload stores a big-endian double (an 8-byte IEEE 754-2008, aka binary64).
TAG_BYTE_ARRAY = 7  #A TAG_Byte_Array payload is the length of the array (a 4-byte big-endian signed integer), followed by exactly that many bytes.
TAG_STRING     = 8  #A TAG_String payload is the length of the UTF-8 encoded string _in bytes_ (a 2-byte big-endian unsigned integer), followed by the encoded bytes.
TAG_LIST       = 9  #A TAG_List payload is the element tagType (1 byte), the length of the list (a 4-byte big-endian signed integer), then that many unnamed payloads.
TAG_COMPOUND   = 10 #A TAG_Compound payload is a sequence of named tag headers + payloads, terminated by a TAG_End (null byte).
TAG_INT_ARRAY  = 11 #A TAG_Int_Array payload is the length of the array (a 4-byte big-endian signed integer) followed by that many 4-byte big-endian signed integers.
TAG_LONG_ARRAY = 12 #A TAG_Long_Array payload is the length of the array (a 4-byte big-endian signed integer) followed by that many 8-byte big-endian signed integers.

#Internal names of tags (indexed by tag type) as defined by the NBT specification
TAG_NAMES = (
    "TAG_End",
    "TAG_Byte",
    "TAG_Short",
    "TAG_Int",
    "TAG_Long",
    "TAG_Float",
    "TAG_Double",
    "TAG_Byte_Array",
    "TAG_String",
    "TAG_List",
    "TAG_Compound",
    "TAG_Int_Array",
    "TAG_Long_Array"
)

#Total number of tags supported by this version of the library.
TAG_COUNT = len( TAG_NAMES )

#Default limit on how deeply TAG_Lists and TAG_Compounds may nest while decoding.
MAX_DEPTH = 512

#Largest byte length of a tag name or TAG_String payload.
MAX_STRING_LENGTH = 65535

#Largest number of entries a TAG_List or array can declare.
MAX_ARRAY_LENGTH = 2147483647

#Payloads larger than this are read in several pieces.
READ_CHUNK_SIZE = 65536

#Structs
_TL = Struct( ">Bi" )     #Tag list header (element type id + count)
_UB = Struct( ">B"  )     #Unsigned byte (1 byte)
_US = Struct( ">H"  )     #Unsigned big-endian short (2 bytes)
_B  = Struct( ">b"  )     #Signed byte (1 byte)
_S  = Struct( ">h"  )     #Signed big-endian short (2 bytes)
_I  = Struct( ">i"  )     #Signed big-endian int (4 bytes)
_L  = Struct( ">q"  )     #Signed big-endian long (8 bytes)
_F  = Struct( ">f"  )     #Big-endian float (4 bytes)
_D  = Struct( ">d"  )     #Big-endian double (8 bytes)

class NBTFormatError( Exception ):
    """This exception is raised when parsing, writing, or building data that violates the NBT specification."""
    pass

class TruncatedInputError( NBTFormatError, EOFError ):
    """
    TruncatedInputError( needed, got )

    This exception is raised when the input ends before a fixed-width field or a declared length could be read in full.
    needed is the number of bytes the decoder asked for, got is how many were actually available.
    It is also an EOFError, so code that catches EOFError around a decode keeps working.
    """
    def __str__( self ):
        if self.args[1] == 0:
            return "End of input reached while expecting {:d} byte{}.".format( self.args[0], "s" if self.args[0] != 1 else "" )
        return "End of input reached prematurely: expected {:d} bytes, but only {:d} were available.".format( *self.args )

class UnknownTagTypeError( NBTFormatError ):
    """
    UnknownTagTypeError( tagType )

    This exception is raised when a tag with an invalid or unrecognized type is decoded or built.
    See "Tag Types" above for valid tag types.
    """
    def __str__( self ):
        return "Unknown or unsupported tag type: {:d}".format( self.args[0] )

class InvalidUtf8Error( NBTFormatError ):
    """
    InvalidUtf8Error( raw )

    This exception is raised when the bytes of a tag name or TAG_String payload are not valid UTF-8.
    raw is the offending bytes object. The original UnicodeDecodeError is available as __cause__.
    """
    def __str__( self ):
        return "Invalid UTF-8 in string of {:d} bytes: {!r}".format( len( self.args[0] ), self.args[0][:32] )

class OutOfBoundsError( NBTFormatError ):
    """
    OutOfBoundsError( value, min, max )

    This exception is raised when building a tag with a value that is outside of the valid range for that type.
    This error can be raised for integral types (byte, short, int, long) if the type cannot represent the value.
    Its subclasses cover lengths: InvalidLengthError and StringTooLongError.
    """
    def __str__( self ):
        return "Value {:d} is outside of expected range [{:d},{:d}].".format( *self.args )

class InvalidLengthError( OutOfBoundsError ):
    """
    InvalidLengthError( length, min, max )

    This exception is raised when a TAG_List, TAG_Byte_Array, TAG_Int_Array or TAG_Long_Array declares a length that cannot be honored,
    e.g. a negative count, or a non-empty TAG_List of TAG_Ends.
    """
    def __str__( self ):
        return "Invalid length {:d}, expected a length in range [{:d},{:d}].".format( *self.args )

class StringTooLongError( OutOfBoundsError ):
    """
    StringTooLongError( length, min, max )

    This exception is raised when encoding a tag name or TAG_String whose UTF-8 encoding is longer than 65535 bytes.
    """
    def __str__( self ):
        return "Encoded string is {:d} bytes long, but at most {:d} bytes can be written.".format( self.args[0], self.args[2] )

class TooDeepError( NBTFormatError ):
    """
    TooDeepError( maxDepth )

    This exception is raised when TAG_Lists and TAG_Compounds are nested more deeply than the decoder allows.
    """
    def __str__( self ):
        return "Tags are nested more than {:d} levels deep.".format( self.args[0] )

class WrongTagError( NBTFormatError ):
    """
    WrongTagError( expected, given )

    This exception is raised when the wrong type of tag is added to a TAG_List, or when a TAG_End is added to a TAG_Compound.
    According to the NBT specification, TAG_Lists are only permitted to contain tags of a single type.
    """
    def __str__( self ):
        return "Expected {}, but received {} instead.".format( describeTag( self.args[0] ), describeTag( self.args[1] ) )

class ConversionError( NBTFormatError ):
    """
    ConversionError( value, tagType )

    This exception is raised when a non-tag value given as a TAG_List item cannot be converted to the list's element type.
    e.g.
        List( "pos", TAG_DOUBLE, [ 1.0, 2.0, "three" ] )
    """
    def __str__( self ):
        return "Unable to convert value of type \"{}\" to a {}.".format( self.args[0].__class__.__name__, TAG_NAMES[ self.args[1] ] )

class SinkWriteError( OSError ):
    """
    SinkWriteError( message )

    This exception is raised when the output sink rejects a write during encoding.
    The underlying exception (if any) is available as __cause__.
    """
    pass

def describeTag( tagType ):
    """
    Returns a short description of a tag with the given tagType, including the internal name and numeric type (e.g. TAG_Compound (10) ).
    tagType is expected to be a number.
    If tagType does not represent a valid tag, returns "Unknown (<tagType>)".
    """
    if tagType < 0 or tagType >= TAG_COUNT:
        return "Unknown ({:d})".format( tagType )
    return "{} ({:d})".format( TAG_NAMES[tagType], tagType )

#_tns
def tagNameString( name ):
    """Return "" if name is empty or None, otherwise return name surrounded by parentheses and double quotes."""
    return "" if not name else "(\"{}\")".format( name )

#_tls
def tagListString( length, tagType ):
    """
    Returns a str summarizing the contents of a TAG_List with the given length and tagType.
    Return "0 entries" if length == 0.
    Otherwise, return "<length> <name of tag>(s)".
    """
    if length == 0:
        return "0 entries"
    return "{:d} {:s}{}".format( length, TAG_NAMES[tagType], "s" if length != 1 else "" )

#_avtt
def assertValidTagType( tagType ):
    """Raises UnknownTagTypeError if the given tagType is unrecognized"""
    if tagType < 0 or tagType >= TAG_COUNT:
        raise UnknownTagTypeError( tagType )

#_r
def read( i, n ):
    """
    Reads exactly n bytes from i (a readable file-like object).
    Streams are allowed to return fewer bytes than asked for; reading continues until n bytes arrive or i returns b"".
    Large reads are done READ_CHUNK_SIZE bytes at a time, so a corrupt length can't allocate more memory than the input actually holds.
    Raises a TruncatedInputError if the end of the input is encountered before n bytes can be read.
    """
    b = i.read( min( n, READ_CHUNK_SIZE ) )
    if len( b ) == n:
        return b
    buf = bytearray( b )
    while len( buf ) < n:
        b = i.read( min( n - len( buf ), READ_CHUNK_SIZE ) )
        if not b:
            raise TruncatedInputError( n, len( buf ) )
        buf += b
    return bytes( buf )

#_w
def write( o, b ):
    """
    Writes b to o (a writable file-like object).
    Raises SinkWriteError if o raises an OSError or reports that it wrote fewer bytes than given.
    """
    try:
        n = o.write( b )
    except OSError as e:
        raise SinkWriteError( "Failed to write {:d} bytes to the output.".format( len( b ) ) ) from e
    if n is not None and n != len( b ):
        raise SinkWriteError( "Short write: only {:d} of {:d} bytes were written.".format( n, len( b ) ) )

#_rub
def readUnsignedByte( i ):
    """Reads an unsigned byte from i (e.g. a tagType)."""
    return read( i, 1 )[0] #note: no struct unpacking necessary; bytes() uses unsigned bytes

#_rst
def readString( i ):
    """
    Reads a tag name or TAG_String payload.
    Raises InvalidUtf8Error if the bytes that were read aren't valid UTF-8.
    """
    b = read( i, _US.unpack( read( i, 2 ) )[0] )
    try:
        return b.decode( "utf-8" )
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error( b ) from e

#_rah
def readArrayHeader( i ):
    """
    Reads the length of a TAG_Byte_Array, TAG_Int_Array or TAG_Long_Array.
    Raises InvalidLengthError if the length is negative.
    """
    l = _I.unpack( read( i, 4 ) )[0]
    if l < 0:
        raise InvalidLengthError( l, 0, MAX_ARRAY_LENGTH )
    return l

#_rlh
def readTagListHeader( i ):
    """
    Reads a TAG_List header.

    Returns a tuple ( tagType, length ).
    tagType is the numerical ID of the tags contained in this list.
    length is how many tags are stored in the list.

    Raises UnknownTagTypeError if tagType is unknown.
    Raises InvalidLengthError if the length of the list is negative, or if a list of TAG_Ends isn't empty.
    """
    tagType = readUnsignedByte( i )
    assertValidTagType( tagType )
    l = _I.unpack( read( i, 4 ) )[0]
    if l < 0:
        raise InvalidLengthError( l, 0, MAX_ARRAY_LENGTH )
    if tagType == TAG_END and l != 0:
        raise InvalidLengthError( l, 0, 0 )
    return ( tagType, l )

#_ris
def readInts( i, n ):
    """Reads n signed, big-endian, 4-byte integers from i and returns them as a tuple."""
    return Struct( ">{:d}i".format( n ) ).unpack( read( i, 4 * n ) )

#_rls
def readLongs( i, n ):
    """Reads n signed, big-endian, 8-byte integers from i and returns them as a tuple."""
    return Struct( ">{:d}q".format( n ) ).unpack( read( i, 8 * n ) )

def encodeString( v ):
    """
    Returns the framed form of a tag name or TAG_String payload: a 2-byte big-endian length followed by the UTF-8 bytes.
    Raises StringTooLongError if the encoded string is longer than 65535 bytes.
    """
    b = v.encode( "utf-8" )
    if len( b ) > MAX_STRING_LENGTH:
        raise StringTooLongError( len( b ), 0, MAX_STRING_LENGTH )
    return _US.pack( len( b ) ) + b

def packInts( v ):
    """Returns the array length followed by the values in v as signed, big-endian, 4-byte integers."""
    return _I.pack( len( v ) ) + Struct( ">{:d}i".format( len( v ) ) ).pack( *v )

def packLongs( v ):
    """Returns the array length followed by the values in v as signed, big-endian, 8-byte integers."""
    return _I.pack( len( v ) ) + Struct( ">{:d}q".format( len( v ) ) ).pack( *v )
