"""
Command-line NBT viewer.

    python -m nbtcodec [--gzip | --zlib] [--max-depth N] [--max-len N] FILE

Prints the decoded tree of FILE. Exits with status 1 if the file can't be read or decoded, or the tree can't be printed.
"""
import argparse
import logging
import math

from nbtcodec.shared import NBTFormatError
from nbtcodec.decode import read

LOG = logging.getLogger( __name__ )

def parseArgs( argv=None ):
    parser = argparse.ArgumentParser( prog="nbtcodec", description="Print the contents of an NBT file as a tree." )
    parser.add_argument( "file", help="Path of the NBT file to read" )
    compression = parser.add_mutually_exclusive_group()
    compression.add_argument( "--gzip", "-g", dest="compression", action="store_const", const="gzip", help="The file is gzip compressed" )
    compression.add_argument( "--zlib", "-z", dest="compression", action="store_const", const="zlib", help="The file is zlib compressed" )
    parser.add_argument( "--max-depth", type=int, default=None, help="Only print this many levels below the root tag" )
    parser.add_argument( "--max-len", type=int, default=None, help="Only print this many entries of each TAG_List / TAG_Compound" )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=[ "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL" ],
        help="Set the logging level (default: INFO)",
    )
    return parser.parse_args( argv )

def main( argv=None, fn=print ):
    """
    Runs the viewer with the given command-line arguments (sys.argv[1:] if None).
    Each line of output is passed to fn. Returns the process exit status.
    """
    args = parseArgs( argv )
    logging.basicConfig( level=getattr( logging, args.log_level ), format="[%(asctime)s] [%(levelname)s] (%(name)s) %(message)s", datefmt="%H:%M:%S" )

    try:
        tag = read( args.file, args.compression )
    except ( NBTFormatError, OSError ) as e:
        LOG.error( "Failed to read %s: %s", args.file, e )
        return 1

    try:
        tag.print(
            math.inf if args.max_depth is None else args.max_depth,
            math.inf if args.max_len   is None else args.max_len,
            fn
        )
    except OSError as e:
        LOG.error( "Failed to print %s: %s", args.file, e )
        return 1
    return 0
