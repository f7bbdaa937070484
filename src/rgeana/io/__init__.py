"""Input and output of the reconstruction.

- `read`: Row sources of detector banks (ROOT files or memory)
- `write`: Sinks of output records (ROOT, HDF5 or CSV files)
"""

from .factories import reader_factory, writer_extension, writer_factory
