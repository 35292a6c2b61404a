"""
nbtcodec is a library for decoding and encoding Named Binary Tag (NBT) data for Python 3.
It reads and writes the canonical big-endian format as immutable trees of Tags, and can print them as a readable tree.
"""

#NBT Tag Types, Limits, Exceptions
from nbtcodec.shared import (
    TAG_END, TAG_BYTE, TAG_SHORT, TAG_INT, TAG_LONG, TAG_FLOAT, TAG_DOUBLE, TAG_BYTE_ARRAY, TAG_STRING, TAG_LIST, TAG_COMPOUND, TAG_INT_ARRAY, TAG_LONG_ARRAY,
    TAG_NAMES, TAG_COUNT, MAX_DEPTH, MAX_STRING_LENGTH,
    NBTFormatError, TruncatedInputError, UnknownTagTypeError, InvalidUtf8Error, OutOfBoundsError, InvalidLengthError, StringTooLongError,
    TooDeepError, WrongTagError, ConversionError, SinkWriteError
)

#Tag and tag constructors
from nbtcodec.tag import Tag, END, End, Byte, Short, Int, Long, Float, Double, ByteArray, String, List, Compound, IntArray, LongArray

#Decoder
from nbtcodec.decode import decode, decodeBytes, read

#Encoder
from nbtcodec.encode import encode, encodeBytes, write


#Export everything we imported above
__all__ = [
    "TAG_END", "TAG_BYTE", "TAG_SHORT", "TAG_INT", "TAG_LONG", "TAG_FLOAT", "TAG_DOUBLE", "TAG_BYTE_ARRAY", "TAG_STRING", "TAG_LIST", "TAG_COMPOUND", "TAG_INT_ARRAY", "TAG_LONG_ARRAY",
    "TAG_NAMES", "TAG_COUNT", "MAX_DEPTH", "MAX_STRING_LENGTH",
    "NBTFormatError", "TruncatedInputError", "UnknownTagTypeError", "InvalidUtf8Error", "OutOfBoundsError", "InvalidLengthError", "StringTooLongError",
    "TooDeepError", "WrongTagError", "ConversionError", "SinkWriteError",
    "Tag", "END", "End", "Byte", "Short", "Int", "Long", "Float", "Double", "ByteArray", "String", "List", "Compound", "IntArray", "LongArray",
    "decode", "decodeBytes", "read",
    "encode", "encodeBytes", "write"
]
