from dataclasses import dataclass

from pydantic import BaseModel


class ZipLocation(BaseModel):
    """ZIP lookup result, shaped like the primary provider's payload."""

    zip_code: str
    city: str
    state: str  # 2-letter code
    county: str | None = None
    timezone: str | None = None
    lat: float | None = None
    lon: float | None = None


@dataclass(frozen=True)
class ParsedLocation:
    state: str | None = None
    city: str | None = None
    zip_code: str | None = None
    county: str | None = None
