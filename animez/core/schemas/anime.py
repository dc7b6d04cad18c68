from pydantic import BaseModel, model_validator, field_validator
from typing import Optional, List


class Anime(BaseModel):
    mal_id: int
    title: str
    title_english: Optional[str] = None
    title_japanese: Optional[str] = None
    image_url: Optional[str] = None
    small_image_url: Optional[str] = None
    large_image_url: Optional[str] = None
    synopsis: Optional[str] = None
    score: Optional[float] = None
    episodes: Optional[int] = None
    status: Optional[str] = None
    aired_from: Optional[str] = None
    aired_to: Optional[str] = None
    genres: List[str] = []
    studios: List[str] = []

    @model_validator(mode="before")
    @classmethod
    def _flatten_jikan(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        jpg = (data.pop("images", None) or {}).get("jpg") or {}
        for key in ("image_url", "small_image_url", "large_image_url"):
            data.setdefault(key, jpg.get(key))
        aired = data.pop("aired", None) or {}
        data.setdefault("aired_from", aired.get("from"))
        data.setdefault("aired_to", aired.get("to"))
        return data

    @field_validator("genres", "studios", mode="before")
    @classmethod
    def _coerce_names_before(cls, v):
        if v is None:
            return []
        return [item["name"] if isinstance(item, dict) else item for item in v]
