"""
Query building for filtered/sorted listings.
"""
from sqlalchemy import Select, select

from app.models import Product
from app.schemas.product import ProductFilter


def build_product_query(filters: ProductFilter) -> Select:
    """Build a SELECT for products from a validated filter.

    Supplied options are combined with AND; absent options don't constrain.
    """
    stmt = select(Product)

    conditions = []
    if filters.category is not None:
        conditions.append(Product.category == filters.category.value)
    if filters.featured is not None:
        conditions.append(Product.featured == filters.featured)
    if conditions:
        stmt = stmt.where(*conditions)

    # ORDER BY in the order the keys were given
    order_by = []
    for attr, descending in filters.sort_keys():
        column = getattr(Product, attr)
        order_by.append(column.desc() if descending else column.asc())
    stmt = stmt.order_by(*order_by)

    return stmt.limit(filters.limit)
