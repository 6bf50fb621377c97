from __future__ import annotations

from typing import Annotated

from pydantic import Field


# --- Stored integer range ---
# Amounts, quantities and clock values live in BIGINT columns.
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1

StoredInt = Annotated[int, Field(ge=BIGINT_MIN, le=BIGINT_MAX)]
