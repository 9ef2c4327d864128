import asyncio

from sqlalchemy import select

from app.db.database import Database
from app.models import Product
from app.services.product_service import ProductService


# Sample catalog
PRODUCTS_DATA = [
    ("iPhone 15", "Latest Apple smartphone", "Electronics", 999.99, 25, True),
    ("MacBook Pro", "14-inch laptop with M3 chip", "Electronics", 1999.99, 10, True),
    ("AirPods Pro", "Noise cancelling earbuds", "Electronics", 249.99, 50, False),
    ("Winter Jacket", "Waterproof insulated jacket", "Clothing", 149.99, 30, False),
    ("Running Shoes", "Lightweight trainers", "Clothing", 89.99, 40, True),
    ("Clean Code", "A handbook of agile software craftsmanship", "Books", 39.99, 100, False),
    ("Standing Desk", "Electric height-adjustable desk", "Home", 399.99, 8, False),
    ("Office Chair", "Ergonomic mesh chair", "Home", 299.99, 12, False),
    ("Yoga Mat", "Non-slip exercise mat", "Sports", 29.99, 60, False),
    ("Gift Card", "Store credit", "Other", 50.00, 999, False),
]


async def seed_database(db: Database) -> int:
    """Create tables and a sample catalog. Returns the number of products added."""
    await db.create_all()

    async with db.session() as session:
        # Check if data exists
        result = await session.execute(select(Product).limit(1))
        if result.scalar():
            print("Database already seeded")
            return 0

    service = ProductService(db)
    for name, description, category, price, stock, featured in PRODUCTS_DATA:
        await service.create({
            "name": name,
            "description": description,
            "category": category,
            "price": price,
            "stock": stock,
            "featured": featured,
        })

    print("Database seeded successfully!")
    return len(PRODUCTS_DATA)


async def main():
    db = Database()
    try:
        await seed_database(db)
    finally:
        await db.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
