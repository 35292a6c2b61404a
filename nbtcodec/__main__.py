import sys

from nbtcodec.cli import main

sys.exit( main() )
