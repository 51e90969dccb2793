"""
Pydantic models for clothing items.

An item is a loosely structured record: a handful of descriptive
strings, free-form style tags, nested colour and material objects
(labels plus a weight per label) and a size that is one of three
shapes, distinguished by its ``kind`` tag:

* ``letter`` – an enumerated letter size such as ``"M"``;
* ``numeric`` – a single number such as ``38``;
* ``paired`` – two numbers such as waist/inseam ``32x34``.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ColorSpec(BaseModel):
    colors: List[str] = Field(default_factory=list, examples=[["navy", "white"]])
    weights: Dict[str, float] = Field(default_factory=dict, examples=[{"navy": 0.8, "white": 0.2}])


class MaterialSpec(BaseModel):
    materials: List[str] = Field(default_factory=list, examples=[["wool", "cashmere"]])
    weights: Dict[str, float] = Field(default_factory=dict, examples=[{"wool": 0.9, "cashmere": 0.1}])


class LetterSize(BaseModel):
    kind: Literal["letter"] = "letter"
    value: Literal["XXS", "XS", "S", "M", "L", "XL", "XXL", "XXXL"]


class NumericSize(BaseModel):
    kind: Literal["numeric"] = "numeric"
    value: float


class PairedSize(BaseModel):
    kind: Literal["paired"] = "paired"
    first: int
    second: int


Size = Annotated[Union[LetterSize, NumericSize, PairedSize], Field(discriminator="kind")]


class ItemBase(BaseModel):
    category: Optional[str] = Field(None, examples=["Tops"])
    sub_category: Optional[str] = Field(None, examples=["Sweaters"])
    type: Optional[str] = Field(None, examples=["Crewneck"])
    styles: List[str] = Field(default_factory=list, examples=[["preppy", "minimal"]])
    fit: Optional[str] = Field(None, examples=["relaxed"])
    length: Optional[str] = Field(None, examples=["cropped"])
    color: Optional[ColorSpec] = None
    material: Optional[MaterialSpec] = None
    brand: Optional[str] = Field(None, examples=["Uniqlo"])
    rating: Optional[int] = Field(None, ge=0, le=10, examples=[5])
    condition: int = Field(10, ge=0, le=10)
    size: Optional[Size] = None
    description: Optional[str] = None
    picture: Optional[str] = None
    purchase_location: Optional[str] = None
    purchase_date: Optional[str] = Field(None, examples=["2021-10-01"])
    purchase_price: Optional[float] = Field(None, ge=0)


class ItemCreate(ItemBase):
    """Schema for creating an item."""
    pass


class ItemRead(ItemBase):
    """Schema for reading an item from the API."""

    id: int

    model_config = {
        "from_attributes": True,
    }
