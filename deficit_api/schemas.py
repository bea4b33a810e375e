from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from deficit_core.filters import DEFAULT_SORT_KEY


class ViewParametersModel(BaseModel):
    command_filter: str = "all"
    sub_unit_filter: str = "all"
    category_filter: str = "all"
    sort_key: str = DEFAULT_SORT_KEY
    sort_direction: str = "descending"


class FilterChangeModel(BaseModel):
    params: ViewParametersModel = Field(default_factory=ViewParametersModel)
    command_filter: Optional[str] = None
    sub_unit_filter: Optional[str] = None
    category_filter: Optional[str] = None


class MetaCommandsResponse(BaseModel):
    commands: List[str]


class MetaSubUnitsResponse(BaseModel):
    sub_units: List[str]
