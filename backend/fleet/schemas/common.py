import re
from typing import Annotated

from pydantic import BaseModel, StringConstraints

NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def check_email(value: str | None) -> str | None:
    """Blank means no email; anything else must look like an address."""
    if value is None or not value.strip():
        return None
    value = value.strip()
    if not EMAIL_RE.match(value):
        raise ValueError("Invalid email format")
    return value


class PageMeta(BaseModel):
    total: int | None
    page: int
    per_page: int
    has_more: bool
    message: str | None = None
