"""Field types shared by commands and events.

Messages are plain frozen dataclasses; these annotations only matter when a
payload is validated on decode. Fields are strict so that a string id or a
string reliability is refused instead of coerced.
"""

from typing import Annotated

from pydantic import Field

from netscope.core.types import MAX_NODE_ID, MIN_NODE_ID

WireId = Annotated[int, Field(strict=True, ge=MIN_NODE_ID, le=MAX_NODE_ID)]
"""Node id on the wire"""

WireFloat = Annotated[float, Field(strict=True, allow_inf_nan=False)]
"""Finite number on the wire; integers are accepted"""

WireText = Annotated[str, Field(strict=True)]
