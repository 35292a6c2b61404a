from setuptools import setup

setup(
    name        = "nbtcodec",
    version     = "1.0.0",
    description = "Decoder and encoder for Named Binary Tag (NBT) data",
    packages    = [ "nbtcodec" ],
    zip_safe    = True,
    python_requires = ">=3.8",
    entry_points = {
        "console_scripts": [ "nbtcodec = nbtcodec.cli:main" ]
    }
)
