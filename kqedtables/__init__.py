"""Reading, writing and validation of the checksummed precomputed tables for the QED kernel.

Also provides the checksum, byte-swapping and timing helpers used with them.
"""

__version__ = "0.14.0"
__all__ = ["checksum", "byteswap", "timer", "grid", "precomp"]