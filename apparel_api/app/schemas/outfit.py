"""
Pydantic models for outfits.

An outfit references the items it is made of by identifier; the items
themselves are never embedded.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class OutfitBase(BaseModel):
    name: Optional[str] = Field(None, examples=["Sunday brunch"])
    description: Optional[str] = None
    styles: List[str] = Field(default_factory=list)
    occasion: Optional[str] = Field(None, examples=["casual"])
    season: Optional[str] = Field(None, examples=["autumn"])
    rating: Optional[int] = Field(None, ge=0, le=10)
    picture: Optional[str] = None
    items: List[int] = Field(default_factory=list, examples=[[1, 4, 7]])


class OutfitCreate(OutfitBase):
    pass


class OutfitRead(OutfitBase):
    id: int

    model_config = {
        "from_attributes": True,
    }
