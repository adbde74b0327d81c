from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict

NATIONAL_REFERRAL_MARKER = "RSUP"
NO_PHONE_PLACEHOLDER = "No phone available"


class ThumbnailKey(StrEnum):
    NATIONAL_REFERRAL = "national_referral"
    GENERAL = "general"
    PULMONARY = "pulmonary"
    JAKARTA = "jakarta"
    JAVA = "java"
    BALI = "bali"
    DEFAULT = "default"


# Checked in order; the first keyword found wins.
_NAME_THUMBNAILS: list[tuple[str, ThumbnailKey]] = [
    ("rsup", ThumbnailKey.NATIONAL_REFERRAL),
    ("umum", ThumbnailKey.GENERAL),
    ("paru", ThumbnailKey.PULMONARY),
]
_PROVINCE_THUMBNAILS: list[tuple[str, ThumbnailKey]] = [
    ("jakarta", ThumbnailKey.JAKARTA),
    ("jawa", ThumbnailKey.JAVA),
    ("bali", ThumbnailKey.BALI),
]


class Facility(BaseModel):
    """Single healthcare facility as returned by the directory endpoint."""

    model_config = ConfigDict(frozen=True)

    name: str
    address: str
    region: str
    province: str
    phone: str | None = None

    @property
    def is_referral_center(self) -> bool:
        return NATIONAL_REFERRAL_MARKER.casefold() in self.name.casefold()

    @property
    def display_phone(self) -> str:
        if self.phone and self.phone.strip():
            return self.phone
        return NO_PHONE_PLACEHOLDER

    @property
    def thumbnail_key(self) -> ThumbnailKey:
        """Presentational image tag derived from name, then province, keywords."""
        name = self.name.casefold()
        for keyword, key in _NAME_THUMBNAILS:
            if keyword in name:
                return key
        province = self.province.casefold()
        for keyword, key in _PROVINCE_THUMBNAILS:
            if keyword in province:
                return key
        return ThumbnailKey.DEFAULT

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on any of the searchable fields."""
        needle = query.casefold()
        return any(
            needle in field.casefold()
            for field in (self.name, self.address, self.province, self.region)
        )
