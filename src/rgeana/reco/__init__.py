"""Per-event particle reconstruction and identification.

**Stages:**
- `builder`: Matches track rows to particle rows into candidates
- `aggregate`: Sums calorimeter energies and photoelectrons, picks the most
  precise time of flight
- `pid`: Assigns the final identity of candidates, geometric acceptance
- `kinematics`: DIS and SIDIS variables
- `pipeline`: Orchestrates the stages for each event
"""

from .aggregate import *
from .builder import *
from .kinematics import *
from .pid import *
from .pipeline import *
