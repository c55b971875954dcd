"""Foundational types shared across the contract layer."""

from typing import NewType

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Type aliases for domain identifiers
RequestId = NewType("RequestId", str)
CollectionId = NewType("CollectionId", str)
EnvironmentId = NewType("EnvironmentId", str)
VariableName = NewType("VariableName", str)


class ContractModel(BaseModel):
    """
    Base for all contract types.

    Instances are immutable. Fields are snake_case in Python and accept their
    camelCase alias on input (requestId, collectionId, queryParams, ...) so
    documents written by the desktop client parse unchanged.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
