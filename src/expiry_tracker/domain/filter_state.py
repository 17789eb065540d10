from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from expiry_tracker.domain.status import Status

ALL = "all"


class FilterState(BaseModel):
    """Transient list filter; never persisted."""

    search: str = Field(default="", description="Case-insensitive search text.")
    category: str = Field(default=ALL, description="Category id or 'all'.")
    status: Union[Status, Literal["all"]] = Field(
        default=ALL, description="Status value or 'all'."
    )

    model_config = ConfigDict(extra="forbid")
