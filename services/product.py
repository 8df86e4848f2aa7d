import logging

from sqlalchemy.ext.asyncio import AsyncSession

import config
from clients.llm import CompletionClient
from enums.product_category import ProductCategory
from exceptions import InvalidProductDataException, ProductNotFoundException
from models.product import ProductDTO, ProductPageDTO, ProductSummaryDTO
from models.review import ProductReviewDTO
from models.search import SearchFiltersDTO
from repositories.cart import CartRepository
from repositories.cartItem import CartItemRepository
from repositories.product import ProductRepository
from services.cart import CartService
from services.query_normalization import QueryNormalizationService
from services.review import ReviewService
from utils.transaction_manager import TransactionManager

EDITABLE_FIELDS = {"name", "description", "price", "stock", "category", "images"}


class ProductService:

    @staticmethod
    async def get_product(product_id: int, session: AsyncSession) -> tuple[ProductDTO, list[ProductReviewDTO]]:
        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)
        reviews = await ReviewService.get_product_reviews(product_id, session)
        return product, reviews

    @staticmethod
    async def list_products(filters: SearchFiltersDTO, page: int, session: AsyncSession) -> ProductPageDTO:
        """Catalog listing: keyword over name/description, PRODUCTS_PER_PAGE per page, newest first by default."""
        page = max(1, page)
        per_page = config.PRODUCTS_PER_PAGE
        products = await ProductRepository.search(
            filters, session, offset=(page - 1) * per_page, limit=per_page
        )
        total = await ProductRepository.count(session, filters)
        return ProductPageDTO(products=products, total=total, page=page, per_page=per_page)

    @staticmethod
    async def get_categories(session: AsyncSession) -> list[str]:
        return await ProductRepository.get_distinct_categories(session)

    @staticmethod
    async def ai_filtered_products(query: str,
                                   client: CompletionClient | None,
                                   session: AsyncSession) -> tuple[SearchFiltersDTO, list[ProductDTO]]:
        """
        Free-text search. The keyword also matches category here, so a degraded
        (keyword-only) result still finds "cameras" by category name.
        """
        filters = await QueryNormalizationService.normalize_filters(query, client)
        products = await ProductRepository.search(filters, session, keyword_matches_category=True)
        logging.info(f"AI filtered search returned {len(products)} products (fallback={filters.fallback})")
        return filters, products

    @staticmethod
    async def ai_recommended_products(prompt: str,
                                      client: CompletionClient | None,
                                      session: AsyncSession) -> tuple[list[ProductDTO], bool]:
        products = await ProductRepository.get_all(session)
        summaries = [ProductSummaryDTO.from_product(product) for product in products]
        ranked_ids, fallback = await QueryNormalizationService.rank_products(prompt, summaries, client)
        by_id = {product.id: product for product in products}
        return [by_id[product_id] for product_id in ranked_ids if product_id in by_id], fallback

    @staticmethod
    def _validate_fields(values: dict, creating: bool) -> dict:
        values = {key: value for key, value in values.items() if key in EDITABLE_FIELDS}
        if creating:
            missing = [field for field in ("name", "price", "category") if values.get(field) in (None, "")]
            if missing:
                raise InvalidProductDataException(f"Missing required fields: {', '.join(missing)}")
        if "name" in values and (values["name"] is None or not str(values["name"]).strip()):
            raise InvalidProductDataException("Product name is required")
        if "price" in values and (values["price"] is None or values["price"] < 0):
            raise InvalidProductDataException("Price must be a non-negative number")
        if "stock" in values and (values["stock"] is None or values["stock"] < 0):
            raise InvalidProductDataException("Stock must be a non-negative integer")
        if "category" in values and values["category"] not in ProductCategory.values():
            raise InvalidProductDataException(
                f"Invalid category. Valid categories: {', '.join(ProductCategory.values())}"
            )
        if "images" in values and values["images"] is None:
            values["images"] = []
        return values

    @staticmethod
    async def create_product(values: dict, admin_id: int, session: AsyncSession) -> ProductDTO:
        values = ProductService._validate_fields(values, creating=True)
        async with TransactionManager.atomic(session):
            product_id = await ProductRepository.create(ProductDTO(**values, user_id=admin_id), session)
        logging.info(f"Product {product_id} created by admin {admin_id}")
        return await ProductRepository.get_by_id(product_id, session)

    @staticmethod
    async def update_product(product_id: int, values: dict, session: AsyncSession) -> ProductDTO:
        """Partial update: only the keys present in ``values`` change."""
        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)
        values = ProductService._validate_fields(values, creating=False)
        async with TransactionManager.atomic(session):
            await ProductRepository.update(product_id, values, session)
        logging.info(f"Product {product_id} updated: {sorted(values.keys())}")
        return await ProductRepository.get_by_id(product_id, session)

    @staticmethod
    async def delete_product(product_id: int, session: AsyncSession) -> None:
        """
        Delete a product. Cart lines referencing it are dropped (and those carts
        re-totalled); order items keep their snapshot with product_id nulled.
        """
        product = await ProductRepository.get_by_id(product_id, session)
        if product is None:
            raise ProductNotFoundException(product_id)

        async with TransactionManager.atomic(session):
            for cart in await CartRepository.get_models_with_product(product_id, session):
                line = CartItemRepository.find_line(cart, product_id)
                if line is not None:
                    CartItemRepository.remove_line(cart, line)
                CartService.recompute_total(cart)
                await CartRepository.save(cart, session)
            await ProductRepository.delete(product_id, session)

        logging.info(f"Product {product_id} ({product.name}) deleted")

    @staticmethod
    async def get_low_stock_products(session: AsyncSession) -> list[ProductDTO]:
        return await ProductRepository.get_low_stock(config.LOW_STOCK_THRESHOLD, session)
