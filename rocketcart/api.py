"""
Cart HTTP API

Local FastAPI surface a UI layer talks to. Cart failures never turn into
HTTP errors: every mutation answers 200 with the resulting cart and the
toasts it produced, and the UI shows those toasts.

Run:
    uvicorn --factory rocketcart.api:create_app
"""
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from rocketcart.cart import CartStore, build_cart_store
from rocketcart.config import Settings, get_settings
from rocketcart.logging import get_logger
from rocketcart.notifications import ToastQueue

logger = get_logger(__name__)


# ==================== MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: Union[int, str]


class UpdateAmountRequest(BaseModel):
    amount: int


class ToastOut(BaseModel):
    category: str
    message: str


class LineItemOut(BaseModel):
    id: Union[int, str]
    name: str
    price: str
    image_url: str
    amount: int


class CartResponse(BaseModel):
    items: list[LineItemOut]
    toasts: list[ToastOut] = Field(default_factory=list)


# ==================== DEPENDENCIES ====================

def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_toasts(request: Request) -> ToastQueue:
    return request.app.state.toasts


def _cart_response(store: CartStore, toasts: Optional[ToastQueue] = None) -> dict:
    return {
        "items": [item.to_dict() for item in store.cart],
        "toasts": [t.to_dict() for t in toasts.drain()] if toasts is not None else [],
    }


# ==================== ROUTES ====================

router = APIRouter(prefix="/api", tags=["cart"])


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.get("/cart", response_model=CartResponse)
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Current cart. Pending toasts stay queued for /notifications."""
    return _cart_response(store)


@router.post("/cart/items", response_model=CartResponse)
async def add_cart_item(
    body: AddToCartRequest,
    store: CartStore = Depends(get_cart_store),
    toasts: ToastQueue = Depends(get_toasts),
):
    await store.add_product(body.product_id)
    return _cart_response(store, toasts)


@router.patch("/cart/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    body: UpdateAmountRequest,
    store: CartStore = Depends(get_cart_store),
    toasts: ToastQueue = Depends(get_toasts),
):
    await store.update_product_amount(product_id, body.amount)
    return _cart_response(store, toasts)


@router.delete("/cart/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    store: CartStore = Depends(get_cart_store),
    toasts: ToastQueue = Depends(get_toasts),
):
    await store.remove_product(product_id)
    return _cart_response(store, toasts)


@router.get("/notifications", response_model=list[ToastOut])
async def drain_notifications(toasts: ToastQueue = Depends(get_toasts)):
    return [t.to_dict() for t in toasts.drain()]


# ==================== APP ====================

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CartStore] = None,
    toasts: Optional[ToastQueue] = None,
) -> FastAPI:
    """
    Build the API app.

    Args:
        settings: Defaults to get_settings()
        store: Prebuilt cart store (tests); built from settings otherwise
        toasts: Toast queue the store reports to; must be the store's
            notifier when both are given
    """
    toasts = toasts if toasts is not None else ToastQueue()
    if store is None:
        store = build_cart_store(settings or get_settings(), toasts)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Cart API ready ({len(store.cart)} item(s) in cart)")
        yield
        await store.aclose()

    app = FastAPI(title="rocketcart", lifespan=lifespan)
    app.state.cart_store = store
    app.state.toasts = toasts

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app
