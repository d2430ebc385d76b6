"""
Shared model helpers: audit timestamps, the file reference shape used by
documents and meeting summaries, and request-to-column dumping for JSON
columns.

Datetime columns hold timezone-aware UTC values. A naive datetime coming from
a request or read back from the database is taken to be UTC already.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from sqlmodel import SQLModel


def utc_now_iso() -> str:
    """ISO timestamp used for created_at / updated_at columns."""
    return datetime.now(timezone.utc).isoformat()


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_values(data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``data`` with every datetime value converted by as_utc."""
    return {
        key: as_utc(value) if isinstance(value, datetime) else value
        for key, value in data.items()
    }


def reject_null(value: Any, field: str) -> Any:
    """Body of field validators for optional update fields whose column is NOT NULL."""
    if value is None:
        raise ValueError(f"{field} cannot be null")
    return value


class FileRef(SQLModel):
    """
    A stored file. Uploading happens outside the API; only the name and the
    download URL are kept.
    """
    name: str
    url: str
    size: Optional[int] = None


def dump_for_table(
    model_in: SQLModel,
    json_fields: Iterable[str],
    exclude_unset: bool = False,
    exclude: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Dump a request schema into column values.

    Nested schemas bound for JSON columns are dumped in JSON mode so dates
    inside them become strings; plain columns keep their Python types, with
    datetimes in UTC.
    """
    json_fields = set(json_fields) - set(exclude)
    data = utc_values(model_in.model_dump(exclude=json_fields | set(exclude), exclude_unset=exclude_unset))
    if json_fields:
        data.update(model_in.model_dump(mode="json", include=json_fields, exclude_unset=exclude_unset))
    return data
