"""PikPix - convert and optimize images from files, URLs or whole directories."""

__version__ = "1.3.0"
