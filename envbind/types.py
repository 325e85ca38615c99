"""
Scalar aliases carrying a bit width.

Python has a single int and float type, so a field declares its width by
annotating with one of these. They are NewType aliases: at runtime values
are plain int / float, only the annotation differs.
"""

from datetime import timedelta
from typing import NewType

Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)

# Platform-width unsigned int, range-checked as 32 bits.
Uint = NewType("Uint", int)
Uint8 = NewType("Uint8", int)
Uint16 = NewType("Uint16", int)
Uint32 = NewType("Uint32", int)
Uint64 = NewType("Uint64", int)

Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

Duration = timedelta
