"""
Principal on whose behalf a call executes.

The principal id is bound as a transaction-local setting that the data
store's row-level security policies read to restrict visible and mutable
rows.
"""

from __future__ import annotations


# Calls made before any session exists (signup, login). Store-side policies
# treat this id as "no row-level access".
NO_PRINCIPAL = -1
