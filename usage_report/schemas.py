from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class FilterUpdateModel(BaseModel):
    """Partial filter update; only the fields that were set are applied."""

    model_config = ConfigDict(extra="forbid")

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    workflow: Optional[str] = None
    sku: Optional[str] = None


class ValueModeModel(BaseModel):
    mode: Literal["minutes", "cost"]
