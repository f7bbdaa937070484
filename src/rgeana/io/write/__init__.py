"""Writers of output records."""

from .csv import *
from .hdf5 import *
from .root import *
