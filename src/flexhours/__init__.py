"""flexhours: weekly worked-time totals and end-of-day projection for a
rendered time-tracking page.

Public entry points live in the subpackages:

- ``flexhours.domain``: pure parsing, locating, validation and projection
- ``flexhours.runtime``: acquisition controller, pipeline and scheduling
- ``flexhours.presentation``: presenter protocol and console output
"""

from __future__ import annotations

__version__ = "0.1.0"
