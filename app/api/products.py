"""Product create/list API endpoints."""
import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse

from app.models.product import Product
from app.schemas.product import ProductRequest, ProductResponse
from app.services.product_store import ProductStore, StorageError

logger = logging.getLogger(__name__)

# Sent with the product list so browsers never cache it and any origin may read it
LIST_HEADERS = {
    "Cache-Control": "no-store",
    "Pragma": "no-cache",
    "Expires": "0",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Expose-Headers": "Content-Length",
    "Access-Control-Max-Age": "86400",
}

ALLOWED_METHODS = "GET, POST"


def get_store(request: Request) -> ProductStore:
    """Dependency returning the store wired into the application."""
    return request.app.state.store


def log_request(request: Request) -> None:
    """Dependency logging method, URL and protocol of each request."""
    logger.info(f"{request.method} {request.url} HTTP/{request.scope.get('http_version', '1.1')}")


def create_router() -> APIRouter:
    """Build a router serving /products."""
    router = APIRouter(prefix="/products", tags=["products"], dependencies=[Depends(log_request)])

    @router.get("", response_model=List[ProductResponse])
    def list_products(store: ProductStore = Depends(get_store)):
        """
        List every stored product.

        No pagination, filtering or sorting; order is whatever storage returns.
        """
        try:
            products = store.get_products()
        except StorageError as e:
            return PlainTextResponse(f"error fetching products: {e}", status_code=500)

        items = [ProductResponse.model_validate(p) for p in products]
        return JSONResponse(content=jsonable_encoder(items), headers=LIST_HEADERS)

    @router.post("", response_model=ProductResponse, status_code=201)
    def create_product(product: ProductRequest, store: ProductStore = Depends(get_store)):
        """
        Create a new product.

        id and created are assigned by storage and returned in the body.
        """
        db_product = Product(
            name=product.name,
            price=product.price,
            available=product.available,
        )

        try:
            store.create_product(db_product)
        except StorageError as e:
            return PlainTextResponse(f"error creating product: {e}", status_code=500)

        return ProductResponse.model_validate(db_product)

    @router.api_route("", methods=["PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"], include_in_schema=False)
    def method_not_allowed():
        """Reject every other verb on /products."""
        return PlainTextResponse(
            "method not allowed", status_code=405, headers={"Allow": ALLOWED_METHODS}
        )

    return router
