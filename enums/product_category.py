from enum import Enum


class ProductCategory(str, Enum):
    ELECTRONICS = "Electronics"
    CAMERAS = "Cameras"
    LAPTOPS = "Laptops"
    ACCESSORIES = "Accessories"
    HEADPHONES = "Headphones"
    FOOD = "Food"
    BOOKS = "Books"
    CLOTHING = "Clothing"
    BEAUTY = "Beauty"
    SPORTS = "Sports"
    OUTDOOR = "Outdoor"
    HOME = "Home"
    AUTOMOTIVE = "Automotive"

    @classmethod
    def values(cls) -> list[str]:
        return [c.value for c in cls]
