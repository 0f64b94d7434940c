# backoffice/schemas/home_page.py
from typing import Any, Dict, List, Optional, Type
from pydantic import BaseModel, Field
import time

class HeroSlide(BaseModel):
    id: str = Field(default_factory=lambda: str(int(time.time() * 1000)))
    title: str = ""
    subtitle: str = ""
    image: str = ""
    link: str = "/products"
    badge: str = ""

class HeroSlidesSection(BaseModel):
    slides: List[HeroSlide] = []

class FeatureItem(BaseModel):
    icon: str = ""
    title: str = ""
    desc: str = ""

class FeatureListSection(BaseModel):
    tagline: Optional[str] = None
    title: Optional[str] = None
    items: List[FeatureItem] = []

class Testimonial(BaseModel):
    name: str = ""
    location: str = ""
    text: str = ""
    rating: int = Field(5, ge=1, le=5)

class TestimonialsSection(BaseModel):
    tagline: Optional[str] = None
    title: Optional[str] = None
    items: List[Testimonial] = []

class HeaderPromoSection(BaseModel):
    enabled: bool = False
    text: str = ""

class PromoBanner(BaseModel):
    tagline: str = ""
    title: str = ""
    subtitle: str = ""
    buttonText: str = ""
    image: str = ""
    link: str = ""

class PromoBannersSection(BaseModel):
    banner1: PromoBanner = Field(default_factory=PromoBanner)
    banner2: PromoBanner = Field(default_factory=PromoBanner)

class SectionHeading(BaseModel):
    tagline: str = ""
    title: str = ""
    buttonText: Optional[str] = None

# Известные секции валидируются своей схемой, остальные хранятся как есть
SECTION_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "hero_slides": HeroSlidesSection,
    "features_bar": FeatureListSection,
    "features": FeatureListSection,
    "testimonials": TestimonialsSection,
    "header_promo": HeaderPromoSection,
    "promo_banners": PromoBannersSection,
    "featured_products": SectionHeading,
    "why_choose_us": SectionHeading,
}

class ImageUploadResponse(BaseModel):
    section_key: str
    url: str

HomePageContentMap = Dict[str, Dict[str, Any]]
