"""
Startup seeding

Creates the bootstrap admin and, when the catalog is empty and
SEED_SAMPLE_DATA is on, a small sample catalog.
"""
import logging

from app.core.config import settings
from app.schemas.product import ProductCreate
from app.services.user_service import UserService
from app.storage.base import Storage

logger = logging.getLogger(__name__)

UNSPLASH = "https://images.unsplash.com/{}?ixlib=rb-4.0.3&auto=format&fit=crop&w={}&h={}"


def _fabric(fabric_id: str, name: str, category: str, photo: str) -> dict:
    return {
        "id": fabric_id,
        "name": name,
        "categoryId": category,
        "thumbnailUrl": UNSPLASH.format(photo, 100, 100),
        "imageUrl": UNSPLASH.format(photo, 1200, 800),
    }


BED_SIZES = [
    {"id": "single", "label": "90x200", "priceDelta": -5000},
    {"id": "small_double", "label": "120x200", "priceDelta": -2500},
    {"id": "double", "label": "140x200", "priceDelta": 0},
    {"id": "queen", "label": "160x200", "priceDelta": 3000},
    {"id": "king", "label": "180x200", "priceDelta": 6000},
    {"id": "custom", "label": "Custom size", "priceDelta": 0},
]

BED_FABRIC_CATEGORIES = [
    {"id": "economy", "name": "Economy", "priceMultiplier": 0.8},
    {"id": "standard", "name": "Standard", "priceMultiplier": 1},
    {"id": "premium", "name": "Premium", "priceMultiplier": 1.3},
]

BED_FABRICS = [
    _fabric("gray", "Gray", "economy", "photo-1594377157809-5c1a31dd3933"),
    _fabric("blue", "Blue", "economy", "photo-1577401239170-897942555fb3"),
    _fabric("brown", "Brown", "economy", "photo-1579271723124-09bdee8249a1"),
    _fabric("beige", "Beige", "standard", "photo-1582966772680-860e372bb558"),
    _fabric("light_gray", "Light gray", "standard", "photo-1586105449897-20b5d46a3b51"),
    _fabric("dark_gray", "Dark gray", "standard", "photo-1618477247222-acbdb0e159b3"),
    _fabric("velvet_blue", "Blue velvet", "premium", "photo-1574634534894-89d7576c8259"),
    _fabric("velvet_green", "Green velvet", "premium", "photo-1517722014278-c256a91a6fba"),
    _fabric("leather_brown", "Brown leather", "premium", "photo-1596461010724-cae17a682069"),
]

MATTRESS_FABRIC_CATEGORIES = [
    {"id": "standard", "name": "Standard", "priceMultiplier": 1},
    {"id": "premium", "name": "Premium", "priceMultiplier": 1.2},
]

MATTRESS_FABRICS = [
    _fabric("white", "White", "standard", "photo-1586105449897-20b5d46a3b51"),
    _fabric("beige", "Beige", "standard", "photo-1582966772680-860e372bb558"),
    _fabric("silver", "Silver", "premium", "photo-1618477247222-acbdb0e159b3"),
]

SAMPLE_PRODUCTS = [
    {
        "name": 'Bed "Morpheus"',
        "description": "Upholstered bed with a soft headboard and a choice of fabrics. "
                       "Available with a lifting mechanism for storage.",
        "category": "bed",
        "basePrice": "41900",
        "images": [UNSPLASH.format("photo-1505693416388-ac5ce068fe85", 1200, 800)],
        "sizes": BED_SIZES,
        "fabricCategories": BED_FABRIC_CATEGORIES,
        "fabrics": BED_FABRICS,
        "hasLiftingMechanism": True,
        "liftingMechanismPrice": "8500",
        "specifications": [
            {"key": "Frame", "value": "Solid pine"},
            {"key": "Headboard height", "value": "115 cm"},
            {"key": "Lifting mechanism", "value": "Gas lift"},
            {"key": "Maximum load", "value": "320 kg"},
            {"key": "Warranty", "value": "18 months"},
        ],
        "discount": 10,
        "featured": True,
    },
    {
        "name": 'Bed "Aurora"',
        "description": "Bed with a tall headboard for classic and modern interiors.",
        "category": "bed",
        "basePrice": "44900",
        "images": [UNSPLASH.format("photo-1560185007-cde436f6a4d0", 1200, 800)],
        "sizes": BED_SIZES,
        "fabricCategories": BED_FABRIC_CATEGORIES,
        "fabrics": BED_FABRICS,
        "hasLiftingMechanism": True,
        "liftingMechanismPrice": "9000",
        "specifications": [
            {"key": "Frame", "value": "Solid beech"},
            {"key": "Headboard height", "value": "120 cm"},
            {"key": "Warranty", "value": "24 months"},
        ],
    },
    {
        "name": 'Mattress "Comfort Lux"',
        "description": "Medium firm orthopedic mattress on independent springs.",
        "category": "mattress",
        "basePrice": "28900",
        "images": [UNSPLASH.format("photo-1631049035182-249067d7618e", 1200, 800)],
        "sizes": BED_SIZES,
        "fabricCategories": MATTRESS_FABRIC_CATEGORIES,
        "fabrics": MATTRESS_FABRICS,
        "specifications": [
            {"key": "Spring unit", "value": "Independent, 256 springs/m2"},
            {"key": "Firmness", "value": "Medium"},
            {"key": "Height", "value": "24 cm"},
            {"key": "Warranty", "value": "36 months"},
        ],
        "discount": 15,
    },
]


async def seed_database(storage: Storage) -> None:
    await UserService(storage).ensure_admin()

    if not settings.SEED_SAMPLE_DATA:
        return
    if await storage.list_products():
        logger.info("Catalog not empty, skipping sample products")
        return

    for payload in SAMPLE_PRODUCTS:
        await storage.create_product(ProductCreate.model_validate(payload).to_record())
    logger.info(f"Seeded {len(SAMPLE_PRODUCTS)} sample products")
