from typing import ClassVar, Tuple

from pydantic import BaseModel, model_validator


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class PartialUpdate(BaseModel):
    """Base for PUT payloads where omitted fields are left untouched.

    Fields named in ``required_fields`` map to NOT NULL columns: they may be
    omitted but not sent as an explicit ``null``.
    """

    required_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode='after')
    def _reject_null_required(self):
        nulled = [
            name for name in self.required_fields
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulled:
            raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
        return self
