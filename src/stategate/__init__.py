"""

# stategate

Coordinate many concurrent Actions over shared, externally stored state so that
a stale observation triggers exactly one Refresh at a time.

"""

### Library Imports
from .errors import *
from .gates import *
###
