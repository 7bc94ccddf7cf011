"""Small, side-effect free helpers for distinguished names.

Keep this package dependency-light to avoid circular imports.
"""

from .dn import dn_components, dn_first_component_value, dn_values_of  # noqa: F401
