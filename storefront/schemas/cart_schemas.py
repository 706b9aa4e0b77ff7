from decimal import Decimal
from pydantic import BaseModel
from typing import List


class ProductImage(BaseModel):
    id: int
    image: str


class ProductDetails(BaseModel):
    id: int
    name: str
    price: Decimal          # the API sends prices as decimal strings
    images: List[ProductImage] = []


class CartLine(BaseModel):
    id: int
    product: int
    product_details: ProductDetails
    quantity: int
    total_price: Decimal    # line total, already computed by the backend


class CartQuantityUpdate(BaseModel):
    quantity: int
