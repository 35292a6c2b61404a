"""
nbtcodec's tag module implements the Tag Value Model: the immutable value that every decoded or buildable NBT node is represented as.

Every node is a Tag. A Tag is identified by its tagType (e.g. TAG_INT) and carries a name and a value whose Python type depends on the tagType.
Tags should be built with the constructor functions defined here (End, Byte, Short, Int, Long, Float, Double, ByteArray, String, List, Compound, IntArray, LongArray),
which check their arguments. The Tag constructor itself performs no checks and is used by the decoder.
"""
import math

from operator import index as _index

from nbtcodec.shared import (
    NBTFormatError, WrongTagError, ConversionError, OutOfBoundsError, InvalidLengthError, InvalidUtf8Error,
    TAG_END, TAG_BYTE, TAG_SHORT, TAG_INT, TAG_LONG, TAG_FLOAT, TAG_DOUBLE, TAG_BYTE_ARRAY, TAG_STRING, TAG_LIST, TAG_COMPOUND, TAG_INT_ARRAY, TAG_LONG_ARRAY,
    TAG_NAMES, _F,
    tagNameString as _tns, tagListString as _tls, assertValidTagType as _avtt
)

_setattr = object.__setattr__

#Name of the constructor function for each tagType, used by repr()
_CTOR_NAMES = (
    "End",
    "Byte",
    "Short",
    "Int",
    "Long",
    "Float",
    "Double",
    "ByteArray",
    "String",
    "List",
    "Compound",
    "IntArray",
    "LongArray"
)

#Inclusive ( min, max ) bounds of the integral tagTypes
_BOUNDS = {
    TAG_BYTE:       (                 -128,                 127 ),
    TAG_SHORT:      (               -32768,               32767 ),
    TAG_INT:        (          -2147483648,          2147483647 ),
    TAG_LONG:       ( -9223372036854775808, 9223372036854775807 ),
    TAG_INT_ARRAY:  (          -2147483648,          2147483647 ),
    TAG_LONG_ARRAY: ( -9223372036854775808, 9223372036854775807 ),
}

#Returns a read-only property that is True when the tag's tagType is one of the given tagTypes.
def _isTagType( *tagTypes ):
    return property( lambda self: self.tagType in tagTypes )

class Tag:
    """
    Tag( tagType, name, value, elementType=None )

    An immutable NBT node.

    tagType is the numerical ID of the tag (e.g. TAG_COMPOUND).
    name is a str. It is empty for TAG_End, for entries of a TAG_List and (usually) for a root tag read from a list context.
    value is the payload:
        TAG_End:                                         None
        TAG_Byte, TAG_Short, TAG_Int, TAG_Long:          int
        TAG_Float, TAG_Double:                           float
        TAG_Byte_Array:                                  bytes
        TAG_String:                                      str
        TAG_List:                                        tuple of unnamed Tags whose tagType is elementType
        TAG_Compound:                                    tuple of named Tags (the terminating TAG_End is never stored)
        TAG_Int_Array, TAG_Long_Array:                   tuple of ints
    elementType is the tagType of a TAG_List's entries, and None for every other tag.

    Two tags are equal when all four fields are equal. Tags are hashable.
    """
    __slots__ = ( "tagType", "name", "value", "elementType" )

    def __init__( self, tagType, name, value, elementType=None ):
        _setattr( self, "tagType", tagType )
        _setattr( self, "name", name )
        _setattr( self, "value", value )
        _setattr( self, "elementType", elementType )

    def __setattr__( self, name, value ):
        raise AttributeError( "Tags are immutable; use renamed() or a constructor to make a new tag." )
    def __delattr__( self, name ):
        raise AttributeError( "Tags are immutable." )

    #Simple means to check if a tag is a specific tagType
    isEnd       = _isTagType( TAG_END )
    isByte      = _isTagType( TAG_BYTE )
    isShort     = _isTagType( TAG_SHORT )
    isInt       = _isTagType( TAG_INT )
    isLong      = _isTagType( TAG_LONG )
    isFloat     = _isTagType( TAG_FLOAT )
    isDouble    = _isTagType( TAG_DOUBLE )
    isByteArray = _isTagType( TAG_BYTE_ARRAY )
    isString    = _isTagType( TAG_STRING )
    isList      = _isTagType( TAG_LIST )
    isCompound  = _isTagType( TAG_COMPOUND )
    isIntArray  = _isTagType( TAG_INT_ARRAY )
    isLongArray = _isTagType( TAG_LONG_ARRAY )

    #Simple means to check properties of the tag
    isNumeric   = _isTagType( TAG_BYTE, TAG_SHORT, TAG_INT, TAG_LONG, TAG_FLOAT, TAG_DOUBLE )
    isIntegral  = _isTagType( TAG_BYTE, TAG_SHORT, TAG_INT, TAG_LONG )
    isReal      = _isTagType( TAG_FLOAT, TAG_DOUBLE )
    isSequence  = _isTagType( TAG_BYTE_ARRAY, TAG_STRING, TAG_LIST, TAG_COMPOUND, TAG_INT_ARRAY, TAG_LONG_ARRAY )

    #__eq__, __hash__, __repr__ and print() walk the tree with an explicit stack; depth is not limited by the interpreter's recursion limit.
    def __eq__( self, other ):
        if other.__class__ is not Tag:
            return NotImplemented
        stack = [ ( self, other ) ]
        while stack:
            a, b = stack.pop()
            if a is b:
                continue
            if a.tagType != b.tagType or a.name != b.name or a.elementType != b.elementType:
                return False
            if a.tagType == TAG_LIST or a.tagType == TAG_COMPOUND:
                if len( a.value ) != len( b.value ):
                    return False
                stack.extend( zip( a.value, b.value ) )
            elif a.value != b.value:
                return False
        return True
    def __ne__( self, other ):
        r = self.__eq__( other )
        return r if r is NotImplemented else not r
    def __hash__( self ):
        #Hashes the pre-order sequence of nodes; container nodes contribute their length in place of their value
        nodes = []
        stack = [ self ]
        while stack:
            t = stack.pop()
            if t.tagType == TAG_LIST or t.tagType == TAG_COMPOUND:
                nodes.append( ( t.tagType, t.name, len( t.value ), t.elementType ) )
                stack.extend( reversed( t.value ) )
            else:
                nodes.append( ( t.tagType, t.name, t.value, t.elementType ) )
        return hash( tuple( nodes ) )

    def __repr__( self ):
        out = []
        stack = [ self ]
        while stack:
            t = stack.pop()
            if t.__class__ is str:
                out.append( t )
            elif t.tagType == TAG_LIST or t.tagType == TAG_COMPOUND:
                if t.tagType == TAG_LIST:
                    out.append( "List({!r}, {}, [".format( t.name, TAG_NAMES[ t.elementType ].upper() ) )
                else:
                    out.append( "Compound({!r}, [".format( t.name ) )
                stack.append( "])" )
                for n, child in enumerate( reversed( t.value ) ):
                    if n:
                        stack.append( ", " )
                    stack.append( child )
            else:
                out.append( t._leafRepr() )
        return "".join( out )

    def _leafRepr( self ):
        t = self.tagType
        if t == TAG_END:
            return "End()"
        elif t == TAG_INT_ARRAY or t == TAG_LONG_ARRAY:
            return "{}({!r}, {!r})".format( _CTOR_NAMES[t], self.name, list( self.value ) )
        return "{}({!r}, {!r})".format( _CTOR_NAMES[t], self.name, self.value )

    def __len__( self ):
        if not self.isSequence:
            raise TypeError( "{} has no len()".format( TAG_NAMES[ self.tagType ] ) )
        return len( self.value )
    def __iter__( self ):
        if not self.isSequence:
            raise TypeError( "{} is not iterable".format( TAG_NAMES[ self.tagType ] ) )
        return iter( self.value )
    def __contains__( self, item ):
        """For a TAG_Compound, checks whether a child with the given name exists. For other sequences, checks item in value."""
        if self.tagType == TAG_COMPOUND:
            return any( t.name == item for t in self.value )
        return item in iter( self )
    def __getitem__( self, key ):
        """
        tag[i]    returns the i-th entry (or slice) of a TAG_List, TAG_Compound, string or array.
        tag[name] returns the child with the given name from a TAG_Compound. Raises KeyError if there is no such child.
        """
        if isinstance( key, str ):
            if self.tagType != TAG_COMPOUND:
                raise TypeError( "Only a TAG_Compound can be indexed by name, not a {}.".format( TAG_NAMES[ self.tagType ] ) )
            t = self.get( key )
            if t is None:
                raise KeyError( key )
            return t
        if not self.isSequence:
            raise TypeError( "{} is not subscriptable".format( TAG_NAMES[ self.tagType ] ) )
        return self.value[ key ]

    def keys( self ):
        """Returns the names of a TAG_Compound's children in order. Duplicate names are reported as many times as they occur."""
        if self.tagType != TAG_COMPOUND:
            raise TypeError( "Only a TAG_Compound has keys, not a {}.".format( TAG_NAMES[ self.tagType ] ) )
        return [ t.name for t in self.value ]

    def get( self, name, default=None ):
        """
        Returns the child of this TAG_Compound with the given name, or default if there is none.
        A compound may hold several children with the same name. In that case the last one wins, just as it would if the children were loaded into a dict.
        """
        if self.tagType != TAG_COMPOUND:
            raise TypeError( "Only a TAG_Compound can be searched by name, not a {}.".format( TAG_NAMES[ self.tagType ] ) )
        for t in reversed( self.value ):
            if t.name == name:
                return t
        return default

    def rget( self, *args, default=None ):
        """
        Recursive get.

        Gets the tag inside of this tag whose name or index is the first argument.
        If there is no such tag, returns default (which is None by default).
        If there is such a tag and len( args ) > 1, looks up the remaining arguments in the found tag the same way.
        Otherwise, returns the found tag.

        Example:
            #Throws an exception if "Data" or "Player" is missing:
            player = level["Data"]["Player"]

            #Does the same thing, but returns None instead of throwing an exception:
            player = level.rget( "Data", "Player" )
        """
        if len( args ) == 0:
            raise TypeError( "rget() takes at least 1 argument but 0 were given." )
        tag = self
        for key in args:
            t = tag.tagType
            if t == TAG_COMPOUND and isinstance( key, str ):
                tag = tag.get( key )
            elif t == TAG_LIST and isinstance( key, int ) and 0 <= key < len( tag.value ):
                tag = tag.value[ key ]
            else:
                return default
            if tag is None:
                return default
        return tag

    def renamed( self, name ):
        """Returns a copy of this tag with the given name. TAG_End can't carry a name."""
        _checkName( name )
        if self.tagType == TAG_END:
            if name:
                raise NBTFormatError( "A TAG_End can't be named." )
            return self
        return Tag( self.tagType, name, self.value, self.elementType )

    def print( self, maxdepth=math.inf, maxlen=math.inf, fn=print ):
        """
        Recursively pretty-print the tag and its children.
        maxdepth is the maximum recursive depth to pretty-print.
            0 prints only this tag,
            1 prints this tag and its children,
            2 prints this tag, its children, and their children, and so on.
            math.inf is the default and prints the entire tree.
        maxlen is the maximum number of tags per TAG_List / TAG_Compound to print.
            For example, 64 would print only the first 64 entries in a list, and print a single ... for the remaining entries.
            math.inf is the default and prints every tag in a list / compound.
        fn is the callable that will be used to print a line of text, and defaults to the built-in print function.

        Examples:
        >>> ex.print()
        TAG_Compound("example"): 2 entries {
            TAG_String("str"): Example string
            TAG_List("floats"): 2 TAG_Floats [
                TAG_Float(0): 5.0999999046325684
                TAG_Float(1): -1.2000000476837158
            ]
        }

        >>> ex.print( 1 )
        TAG_Compound("example"): 2 entries {
            TAG_String("str"): Example string
            TAG_List("floats"): 2 TAG_Floats [ ... ]
        }
        """
        #Entries are either lines waiting to be printed or ( tag, name, depth ) tuples
        stack = [ ( self, _tns( self.name ), 0 ) ]
        while stack:
            entry = stack.pop()
            if entry.__class__ is str:
                fn( entry )
            else:
                t, name, depth = entry
                _PRINTERS[ t.tagType ]( t, name, depth, maxdepth, maxlen, fn, stack )
    def sprint( self, maxdepth=math.inf, maxlen=math.inf ):
        """
        Recursively pretty-print the tag and its children to a string and return it.
        See help( Tag.print ) for a description of maxdepth and maxlen.
        """
        lines = []
        self.print( maxdepth, maxlen, lines.append )
        return "".join( line + "\n" for line in lines )

def _checkName( name ):
    if not isinstance( name, str ):
        raise TypeError( "Tag names must be str, not {}.".format( name.__class__.__name__ ) )
    _checkText( name )

#Strings containing lone surrogates can't be encoded as UTF-8.
def _checkText( v ):
    try:
        v.encode( "utf-8" )
    except UnicodeEncodeError as e:
        raise InvalidUtf8Error( v.encode( "utf-8", "surrogatepass" ) ) from e

def _checkIntegral( v, tagType ):
    v = _index( v )
    vmin, vmax = _BOUNDS[ tagType ]
    if v < vmin or v > vmax:
        raise OutOfBoundsError( v, vmin, vmax )
    return v

#The single TAG_End instance
END = Tag( TAG_END, "", None )

def End():
    """Returns the TAG_End tag. It has no name and no payload."""
    return END

def Byte( name, value ):
    """Makes a TAG_Byte. value must be an int in the range [-128, 127]."""
    _checkName( name )
    return Tag( TAG_BYTE, name, _checkIntegral( value, TAG_BYTE ) )

def Short( name, value ):
    """Makes a TAG_Short. value must be an int in the range [-32768, 32767]."""
    _checkName( name )
    return Tag( TAG_SHORT, name, _checkIntegral( value, TAG_SHORT ) )

def Int( name, value ):
    """Makes a TAG_Int. value must be an int in the range [-2147483648, 2147483647]."""
    _checkName( name )
    return Tag( TAG_INT, name, _checkIntegral( value, TAG_INT ) )

def Long( name, value ):
    """Makes a TAG_Long. value must be an int in the range [-9223372036854775808, 9223372036854775807]."""
    _checkName( name )
    return Tag( TAG_LONG, name, _checkIntegral( value, TAG_LONG ) )

def Float( name, value ):
    """
    Makes a TAG_Float.
    value is rounded to the nearest single-precision float, so the tag compares equal to itself after being written and read back.
    Raises OverflowError if value is finite but too large for a single-precision float.
    """
    _checkName( name )
    return Tag( TAG_FLOAT, name, _F.unpack( _F.pack( float( value ) ) )[0] )

def Double( name, value ):
    """Makes a TAG_Double."""
    _checkName( name )
    return Tag( TAG_DOUBLE, name, float( value ) )

def ByteArray( name, values=b"" ):
    """
    Makes a TAG_Byte_Array.
    values can be any bytes-like object, or an iterable of ints in the range [0, 255].
    The NBT specification considers these bytes to be of "unspecified format"; they are stored as unsigned bytes.
    """
    _checkName( name )
    return Tag( TAG_BYTE_ARRAY, name, bytes( values ) )

def String( name, value ):
    """Makes a TAG_String. value must be a str; its UTF-8 encoding may be at most 65535 bytes long to be written."""
    _checkName( name )
    if not isinstance( value, str ):
        raise TypeError( "TAG_String value must be str, not {}.".format( value.__class__.__name__ ) )
    _checkText( value )
    return Tag( TAG_STRING, name, value )

def List( name, elementType, items=() ):
    """
    Makes a TAG_List whose entries are all of the given elementType (e.g. TAG_INT).

    items can be tags or non-tag values.
        Tags must have the list's elementType (otherwise WrongTagError is raised) and must be unnamed (otherwise NBTFormatError is raised).
        Non-tag values are converted by calling the elementType's constructor with an empty name, e.g. 5 becomes Int( "", 5 ) in a list of TAG_INTs.
        If this isn't possible, a ConversionError is raised. TAG_List and TAG_Compound entries must be given as tags.

    A list of TAG_Ends is only valid when it is empty, which is how empty lists of unknown type are normally written.
    """
    _checkName( name )
    _avtt( elementType )
    ctor = _CONSTRUCTORS[ elementType ]
    converts = elementType not in ( TAG_END, TAG_LIST, TAG_COMPOUND )

    entries = []
    for v in items:
        if v.__class__ is Tag:
            if v.tagType != elementType:
                raise WrongTagError( elementType, v.tagType )
            if v.name:
                raise NBTFormatError( "TAG_List entries can't be named, but an entry named \"{}\" was given.".format( v.name ) )
        elif converts:
            try:
                v = ctor( "", v )
            except ( TypeError, ValueError, OverflowError ) as e:
                raise ConversionError( v, elementType ) from e
        else:
            raise ConversionError( v, elementType )
        entries.append( v )

    if elementType == TAG_END and entries:
        raise InvalidLengthError( len( entries ), 0, 0 )
    return Tag( TAG_LIST, name, tuple( entries ), elementType )

def Compound( name, children=() ):
    """
    Makes a TAG_Compound.

    children can be an iterable of named tags, or a mapping of names to tags (the tags are renamed to their keys).
    TAG_End can't be a child; the terminator is implied and written automatically.
    Children with duplicate names are kept as-is, in order.
    """
    _checkName( name )
    if hasattr( children, "items" ):
        children = [ t.renamed( n ) if t.__class__ is Tag else t for n, t in children.items() ]

    entries = []
    for t in children:
        if t.__class__ is not Tag:
            raise TypeError( "TAG_Compound children must be tags, not {}.".format( t.__class__.__name__ ) )
        if t.tagType == TAG_END:
            raise WrongTagError( TAG_COMPOUND, TAG_END )
        entries.append( t )
    return Tag( TAG_COMPOUND, name, tuple( entries ) )

def IntArray( name, values=() ):
    """Makes a TAG_Int_Array from an iterable of ints in the range [-2147483648, 2147483647]."""
    _checkName( name )
    return Tag( TAG_INT_ARRAY, name, tuple( _checkIntegral( v, TAG_INT_ARRAY ) for v in values ) )

def LongArray( name, values=() ):
    """Makes a TAG_Long_Array from an iterable of ints in the range [-9223372036854775808, 9223372036854775807]."""
    _checkName( name )
    return Tag( TAG_LONG_ARRAY, name, tuple( _checkIntegral( v, TAG_LONG_ARRAY ) for v in values ) )

#Constructor functions indexed by tagType
_CONSTRUCTORS = (
    End,
    Byte,
    Short,
    Int,
    Long,
    Float,
    Double,
    ByteArray,
    String,
    List,
    Compound,
    IntArray,
    LongArray
)

#Steps of Tag.print(), one per tagType.
#name is a str inserted after the tag type indicating the name/index of that tag within its parent. For example:
#   "" for no name
#   "(5)" for a TAG_List entry with index 5
#   "(\"example\")" for a TAG_Compound entry with name "example"
def _pEnd( self, name, depth, maxdepth, maxlen, fn, stack ):
    fn( "{}TAG_End".format( "    "*depth ) )

def _pInt( self, name, depth, maxdepth, maxlen, fn, stack ):
    fn( "{}{}{}: {:d}".format( "    "*depth, TAG_NAMES[ self.tagType ], name, self.value ) )

def _pReal( self, name, depth, maxdepth, maxlen, fn, stack ):
    fn( "{}{}{}: {:.17g}".format( "    "*depth, TAG_NAMES[ self.tagType ], name, self.value ) )

def _pString( self, name, depth, maxdepth, maxlen, fn, stack ):
    fn( "{}TAG_String{}: {:s}".format( "    "*depth, name, self.value ) )

def _makeArrayPrinter( unit ):
    def printer( self, name, depth, maxdepth, maxlen, fn, stack ):
        l = len( self.value )
        fn( "{}{}{}: [{:d} {}{}]".format( "    "*depth, TAG_NAMES[ self.tagType ], name, l, unit, "s" if l != 1 else "" ) )
    return printer

#Prints a container's opening line and pushes its entries and closing line(s) onto stack in reverse order, so Tag.print() pops them in order.
def _pContainer( line, close, indent, entries, depth, maxdepth, maxlen, fn, stack ):
    l = len( entries )
    if l == 0:
        fn( line + close )
    elif depth < maxdepth and maxlen != 0:
        fn( line )
        stack.append( indent + close )
        if maxlen < l:
            stack.append( indent + "    ..." )
            entries = entries[:maxlen]
        depth = depth + 1
        for n, t in reversed( entries ):
            stack.append( ( t, n, depth ) )
    else:
        fn( line + " ... " + close )

def _pList( self, name, depth, maxdepth, maxlen, fn, stack ):
    indent = "    "*depth
    line = "{}TAG_List{}: {} [".format( indent, name, _tls( len( self.value ), self.elementType ) )
    entries = [ ( "({:d})".format( i ), t ) for i, t in enumerate( self.value ) ]
    _pContainer( line, "]", indent, entries, depth, maxdepth, maxlen, fn, stack )

def _pCompound( self, name, depth, maxdepth, maxlen, fn, stack ):
    l = len( self.value )
    indent = "    "*depth
    line = "{}TAG_Compound{}: {:d} entr{} {{".format( indent, name, l, "ies" if l != 1 else "y" )
    entries = [ ( _tns( t.name ), t ) for t in self.value ]
    _pContainer( line, "}", indent, entries, depth, maxdepth, maxlen, fn, stack )

_PRINTERS = (
    _pEnd,                          #TAG_END
    _pInt,                          #TAG_BYTE
    _pInt,                          #TAG_SHORT
    _pInt,                          #TAG_INT
    _pInt,                          #TAG_LONG
    _pReal,                         #TAG_FLOAT
    _pReal,                         #TAG_DOUBLE
    _makeArrayPrinter( "byte" ),    #TAG_BYTE_ARRAY
    _pString,                       #TAG_STRING
    _pList,                         #TAG_LIST
    _pCompound,                     #TAG_COMPOUND
    _makeArrayPrinter( "int" ),     #TAG_INT_ARRAY
    _makeArrayPrinter( "long" )     #TAG_LONG_ARRAY
)
