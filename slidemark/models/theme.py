"""Theme contracts."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import ConfigDict, Field, constr

from .base import SlidemarkBaseModel
from .css import CssNode

NonEmptyStr = constr(min_length=1)


class Theme(SlidemarkBaseModel):
    """A registered CSS theme. Never mutated after construction."""

    model_config = ConfigDict(frozen=True)

    name: NonEmptyStr
    css: str = Field(..., description="Original CSS text")
    rules: List[CssNode] = Field(default_factory=list)
    meta: Dict[str, str] = Field(default_factory=dict)
    import_name: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
