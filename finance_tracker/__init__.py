"""Top‑level package for the Finance Tracker.

The primary modules are:

* ``models`` – transactions, budgets and users
* ``analytics`` – pandas based totals, breakdowns and monthly trends
* ``budgets`` – category budgets and their progress
* ``reports`` – CSV and text report generation
* ``session`` – the signed-in user's state and UI actions
* ``visualization`` – functions that generate Plotly figures

To run the tracker from the command line you can execute:

```bash
streamlit run finance_tracker/Home.py
```
"""

from . import analytics  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience

__all__ = ["analytics", "visualization"]
