from typing import Any, Dict

from humps import camelize  # type: ignore[attr-defined]
from pydantic import BaseModel, ConfigDict


class BaseDomain(BaseModel):
    """
    Shared pydantic base. Python code reads snake_case, the storefront
    frontend sends and receives camelCase.
    """

    model_config = ConfigDict(
        alias_generator=camelize,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
        extra='forbid',
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    def get_provided_fields(self) -> Dict[str, Any]:
        """
        Only the fields present in the payload, explicit nulls included.
        PATCH handlers use this so clearing a field differs from leaving it alone.
        """
        return self.model_dump(exclude_unset=True)
