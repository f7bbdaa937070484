"""Data structures used throughout the rgeana package.

**Core Data Structures:**
- `bank`: Schema-driven containers for the detector banks of one event
- `particle`: Per-track particle candidates
- `record`: Flat output record, one per accepted particle
- `run_info`: Run-level information (run number, beam energy)

**Data Hierarchy:**
```
 Detector banks  →  Particle candidates  →  Output records
       ↓                    ↓                      ↓
 Track/Particle/     Matched, aggregated,    36 numeric columns
 CAL/CC/SC/FMT       classified              per accepted particle
```
"""

from .bank import *
from .particle import *
from .record import *
from .run_info import *
