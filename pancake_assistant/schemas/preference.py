"""Preference schemas."""

from typing import Any

from pydantic import BaseModel


class PreferenceValue(BaseModel):
    """A preference value; any JSON value is accepted."""

    key: str | None = None
    value: Any = None
