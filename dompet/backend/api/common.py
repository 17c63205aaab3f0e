"""
Helpers shared by the API routers
"""
from typing import Any, Dict, Iterable

from fastapi import HTTPException, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from dompet.fields import FieldMap
from dompet.validators import validate_required_fields


class ClientModel(BaseModel):
    """Request body using the client's camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)

    def client_fields(self, exclude_unset: bool = False) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=exclude_unset)


def require_fields(**values) -> None:
    """Raise 400 naming every missing field (pass client-facing names)."""
    valid, message = validate_required_fields(values)
    if not valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def sparse_columns(update: ClientModel, field_map: FieldMap,
                   nullable: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Storage columns for the fields present in an update request.

    Only fields the caller actually sent are included, so omitted fields
    keep their stored value. An explicit null is only accepted for the
    client fields listed in nullable.
    """
    data = update.client_fields(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

    nulls = [name for name, value in data.items() if value is None and name not in nullable]
    if nulls:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{', '.join(nulls)} cannot be null"
        )
    return field_map.to_storage(data)


def not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")
