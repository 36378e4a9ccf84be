# sdk/models.py
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Union[int, str]
    name: str = ""
    description: Optional[str] = ""
    price: Optional[float] = 0
    stock: Optional[int] = 0
    category: Optional[str] = None
    brand: Optional[str] = None
    location: Optional[str] = None
    sizes: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[Union[str, int, float]] = Field(default=None, alias="createdAt")
