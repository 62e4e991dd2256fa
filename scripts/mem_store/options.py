"""Options accepted by Collection.set / add / remove."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SetOptions(BaseModel):
    """Flags steering one reconcile call.

    Extra keys are kept so callers can thread their own values through to
    ``parse`` hooks.
    """

    model_config = ConfigDict(extra="allow")

    add: bool = Field(default=True, description="Insert records not yet present")
    remove: bool = Field(default=True, description="Evict records missing from the batch")
    merge: bool = Field(default=True, description="Fold matched inputs into existing records")
    at: int | None = Field(default=None, description="Insertion position; disables auto-sort")
    sort: bool = Field(default=True, description="Allow comparator-driven resort")
    silent: bool = Field(default=False, description="Suppress change notifications")
    parse: bool = Field(default=False, description="Run parse hooks before interpreting input")


ADD_OPTIONS = {"merge": False, "add": True, "remove": False}
