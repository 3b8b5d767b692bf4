"""FastAPI routes for storefront sessions: cart, checkout and order history."""

from fastapi import APIRouter

from ordering.api.schemas import (
    NOT_SIGNED_IN,
    AddCartItemRequest,
    CartLineResponse,
    CartResponse,
    ConfirmationResponse,
    ConfirmOrderRequest,
    HistoryResponse,
    OrderedItemResponse,
    OrderResponse,
    OrderSummaryResponse,
    SessionResponse,
    SignOutResponse,
    StatusResponse,
    format_money,
)
from ordering.checkout.flow import Confirmation
from ordering.history.reader import HistoryView
from ordering.order.order import Order
from ordering.session import SessionRegistry, StorefrontSession
from ordering.utils.logging import bind_session

sessions = SessionRegistry()

router = APIRouter(prefix="/sessions", tags=["sessions"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _session(session_id: str) -> StorefrontSession:
    session = sessions.get(session_id)
    bind_session(session.session_id, session.user_id)
    return session


def _identity_label(user_id: str | None) -> str:
    return user_id or NOT_SIGNED_IN


def _cart_response(session: StorefrontSession) -> CartResponse:
    totals = session.cart.totals()
    return CartResponse(
        lines=[
            CartLineResponse(
                product_id=line.product_id,
                name=line.name or "",
                unit_price=format_money(line.unit_price),
                quantity=line.quantity,
                line_total=format_money(line.line_total),
            )
            for line in session.cart.lines
        ],
        total_items=totals.total_items,
        total_price=format_money(totals.total_price),
    )


def _session_response(session: StorefrontSession) -> SessionResponse:
    totals = session.cart.totals()
    return SessionResponse(
        session_id=session.session_id,
        user_id=session.user_id,
        identity=_identity_label(session.user_id),
        flow_state=session.flow.state.value,
        total_items=totals.total_items,
        total_price=format_money(totals.total_price),
    )


def _confirmation_response(session: StorefrontSession, confirmation: Confirmation) -> ConfirmationResponse:
    result = confirmation.result
    return ConfirmationResponse(
        flow_state=session.flow.state.value,
        persisted=confirmation.persisted,
        order_id=str(result.order.id) if result.order else None,
        error=result.error.__class__.__name__ if result.error else None,
        summary=OrderSummaryResponse(
            full_name=confirmation.summary.full_name,
            email=confirmation.summary.email,
            shipping_address=confirmation.summary.shipping_address,
            total=format_money(confirmation.summary.total),
        ),
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        created_at=order.created_at.isoformat(),
        order_total=format_money(order.order_total),
        items=[
            OrderedItemResponse(
                product_id=item.product_id,
                name=item.name or "",
                unit_price=format_money(item.unit_price),
                quantity=item.quantity,
                line_total=format_money(item.line_total),
            )
            for item in order.lines()
        ],
    )


def _history_response(session: StorefrontSession, view: HistoryView) -> HistoryResponse:
    return HistoryResponse(
        status=view.status.value,
        identity=_identity_label(session.user_id),
        orders=[_order_response(order) for order in view.orders],
        message=view.message,
    )


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------
@router.post("", status_code=201, response_model=SessionResponse)
async def create_session() -> SessionResponse:
    session = await sessions.create()
    bind_session(session.session_id, session.user_id)
    return _session_response(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    return _session_response(_session(session_id))


@router.delete("/{session_id}", response_model=StatusResponse)
async def end_session(session_id: str) -> StatusResponse:
    _session(session_id)
    await sessions.end(session_id)
    return StatusResponse()


@router.post("/{session_id}/sign-out", response_model=SignOutResponse)
async def sign_out(session_id: str) -> SignOutResponse:
    session = _session(session_id)
    user_id = await session.sign_out()
    return SignOutResponse(user_id=user_id, identity=_identity_label(user_id))


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@router.get("/{session_id}/cart", response_model=CartResponse)
async def get_cart(session_id: str) -> CartResponse:
    return _cart_response(_session(session_id))


@router.post("/{session_id}/cart/items", response_model=CartResponse)
async def add_cart_item(session_id: str, body: AddCartItemRequest) -> CartResponse:
    session = _session(session_id)
    session.cart.add_to_cart(body.product_id, body.name, body.unit_price)
    return _cart_response(session)


@router.delete("/{session_id}/cart/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(session_id: str, product_id: int) -> CartResponse:
    session = _session(session_id)
    session.cart.remove_one(product_id)
    return _cart_response(session)


@router.post("/{session_id}/cart/open", response_model=CartResponse)
async def open_cart(session_id: str) -> CartResponse:
    session = _session(session_id)
    session.flow.open_cart()
    return _cart_response(session)


@router.post("/{session_id}/cart/close", response_model=StatusResponse)
async def close_cart(session_id: str) -> StatusResponse:
    _session(session_id).flow.close_cart()
    return StatusResponse()


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
@router.post("/{session_id}/checkout", response_model=SessionResponse)
async def proceed_to_checkout(session_id: str) -> SessionResponse:
    session = _session(session_id)
    session.flow.proceed_to_checkout()
    return _session_response(session)


@router.post("/{session_id}/checkout/close", response_model=StatusResponse)
async def close_checkout(session_id: str) -> StatusResponse:
    _session(session_id).flow.close_checkout()
    return StatusResponse()


@router.post("/{session_id}/checkout/confirm", response_model=ConfirmationResponse)
async def confirm_order(session_id: str, body: ConfirmOrderRequest) -> ConfirmationResponse:
    session = _session(session_id)
    confirmation = session.flow.confirm_order(
        full_name=body.full_name,
        email=body.email,
        shipping_address=body.shipping_address,
    )
    return _confirmation_response(session, confirmation)


@router.post("/{session_id}/confirmation/close", response_model=StatusResponse)
async def close_confirmation(session_id: str) -> StatusResponse:
    _session(session_id).flow.close_confirmation()
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order history
# ---------------------------------------------------------------------------
@router.post("/{session_id}/history/open", response_model=HistoryResponse)
async def open_history(session_id: str) -> HistoryResponse:
    session = _session(session_id)
    view = await session.open_history()
    return _history_response(session, view)


@router.post("/{session_id}/history/close", response_model=StatusResponse)
async def close_history(session_id: str) -> StatusResponse:
    _session(session_id).close_history()
    return StatusResponse()
