"""Checkout session: wallet preview, order totals and order placement.

The redemption figures shown while the user edits the cart and the ones
frozen into the order both come from ``compute_redemption``; the session
only decides whether they are applied (the "use wallet" toggle) and lets the
server overrule them through the validation round trip.
"""

import asyncio
import json
from decimal import Decimal
from typing import Iterable, Optional

import httpx
from libs.common.config import get_settings
from libs.common.currency import ZERO, parse_decimal, round_money
from libs.common.logging import get_logger
from services.cart_service.client import CartClient
from services.cart_service.schemas import RemoteCartItem
from services.checkout_service.client import OrdersClient
from services.checkout_service.schemas import (
    Address,
    CheckoutTotals,
    CreateOrderRequest,
    Order,
    OrderLine,
    PaymentMethod,
)
from services.wallet_service.client import WalletClient
from services.wallet_service.redemption import compute_redemption, ineligibility_reason
from services.wallet_service.schemas import (
    IneligibilityReason,
    RedemptionResult,
    RedemptionValidation,
    WalletPolicy,
)

logger = get_logger(__name__)

_UNSET = object()


class CheckoutError(Exception):
    """Order could not be placed; ``message`` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def cart_subtotal(items: Iterable[RemoteCartItem]) -> Decimal:
    """Sum of ``price * quantity`` over the cart lines."""
    subtotal = ZERO
    for item in items:
        if item.product is None:
            continue
        subtotal += item.product.price * item.quantity
    return subtotal


def _error_message(response: httpx.Response) -> str:
    """User-facing message from an error body, ``message`` or ``detail``."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return "Coins cannot be applied right now"


class CheckoutSession:
    """Wallet state for one checkout screen."""

    def __init__(
        self,
        subtotal=ZERO,
        balance: int = 0,
        policy: Optional[WalletPolicy] = None,
        shipping_cost: Optional[Decimal] = None,
    ):
        self.subtotal = parse_decimal(subtotal, ZERO)
        self.balance = balance
        self.policy = policy
        self.shipping_cost = (
            shipping_cost if shipping_cost is not None else get_settings().SHIPPING_COST
        )
        self.items: list[RemoteCartItem] = []
        self.use_wallet = False
        self.server_message: Optional[str] = None
        self.result: RedemptionResult = compute_redemption(
            self.subtotal, self.balance, self.policy
        )

    @classmethod
    async def load(
        cls, cart_client: CartClient, wallet_client: WalletClient
    ) -> "CheckoutSession":
        """Fetch cart, balance and policy concurrently and build a session."""
        items, balance, policy = await asyncio.gather(
            cart_client.list_items(),
            wallet_client.get_balance(),
            wallet_client.get_policy(),
        )
        session = cls(subtotal=cart_subtotal(items), balance=balance, policy=policy)
        session.items = items
        return session

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def update(self, *, subtotal=_UNSET, balance=_UNSET, policy=_UNSET) -> RedemptionResult:
        """Apply changed inputs and recompute the redemption."""
        if subtotal is not _UNSET:
            self.subtotal = parse_decimal(subtotal, ZERO)
        if balance is not _UNSET:
            self.balance = balance
        if policy is not _UNSET:
            self.policy = policy

        self.result = compute_redemption(self.subtotal, self.balance, self.policy)
        self.server_message = None

        if not self.result.applicable and self.use_wallet:
            logger.info("Wallet discount no longer applicable; turning it off")
            self.use_wallet = False
        return self.result

    def set_items(self, items: list[RemoteCartItem]) -> RedemptionResult:
        self.items = items
        return self.update(subtotal=cart_subtotal(items))

    def set_use_wallet(self, value: bool) -> bool:
        """Flip the "use wallet" toggle without recomputing.

        Turning it on is ignored while nothing is redeemable.
        """
        if value and not self.result.applicable:
            return self.use_wallet
        self.use_wallet = value
        return self.use_wallet

    @property
    def wallet_applied(self) -> bool:
        return self.use_wallet and self.result.applicable

    @property
    def reason(self) -> Optional[IneligibilityReason]:
        if self.server_message is not None and not self.result.applicable:
            return IneligibilityReason.NOTHING_REDEEMABLE
        return ineligibility_reason(self.subtotal, self.balance, self.policy)

    def totals(self) -> CheckoutTotals:
        discount = self.result.discount if self.wallet_applied else ZERO
        coins = self.result.coins_to_use if self.wallet_applied else 0
        before_wallet = self.subtotal + self.shipping_cost
        return CheckoutTotals(
            subtotal=self.subtotal,
            shipping=self.shipping_cost,
            wallet_discount=discount,
            wallet_coins_used=coins,
            total=max(ZERO, before_wallet - discount),
        )

    async def validate_with_server(
        self, wallet_client: WalletClient, categories: Iterable[str] = ()
    ) -> RedemptionValidation:
        """Confirm the previewed coins with the server.

        The server wins when the two disagree: a rejection disables the
        wallet discount and keeps the message for the user; an accepted but
        different figure replaces the local one.
        """
        try:
            validation = await wallet_client.validate_redemption(
                amount=self.subtotal,
                coins_to_use=self.result.coins_to_use,
                categories=categories,
            )
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Redemption validation returned %d", e.response.status_code
            )
            validation = RedemptionValidation(
                valid=False, message=_error_message(e.response)
            )

        if not validation.valid:
            logger.info("Server rejected redemption: %s", validation.message)
            self.result = self.result.model_copy(update={"applicable": False})
            self.use_wallet = False
            self.server_message = validation.message
            return validation

        server_discount = round_money(validation.discount)
        if (validation.coins_applicable, server_discount) != (
            self.result.coins_to_use,
            self.result.discount,
        ):
            logger.warning(
                "Server adjusted redemption from %d coins/%s to %d coins/%s",
                self.result.coins_to_use,
                self.result.discount,
                validation.coins_applicable,
                server_discount,
            )
            applicable = validation.coins_applicable > 0 and server_discount > ZERO
            self.result = RedemptionResult(
                coins_to_use=validation.coins_applicable,
                discount=server_discount,
                applicable=applicable,
            )
            if not applicable:
                self.use_wallet = False
        self.server_message = validation.message or None
        return validation

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def build_order(
        self,
        *,
        user_id: int,
        address: Address,
        payment_method: PaymentMethod = PaymentMethod.COD,
        email: str = "",
        payment_id: Optional[str] = None,
        payment_order_id: Optional[str] = None,
    ) -> CreateOrderRequest:
        """Freeze the current totals and redemption into an order payload."""
        totals = self.totals()
        shipping_details = json.dumps(
            {
                "name": address.full_name,
                "email": email,
                "phone": address.phone,
                "address": address.address,
                "city": address.city,
                "state": address.state,
                "zipCode": address.pincode,
                "notes": "",
            }
        )
        lines = [
            OrderLine(product_id=item.product_id, quantity=item.quantity)
            for item in self.items
            if item.quantity > 0
        ]
        return CreateOrderRequest(
            user_id=user_id,
            total=totals.total,
            payment_method=payment_method,
            payment_id=payment_id,
            order_id=payment_order_id,
            shipping_details=shipping_details,
            address_id=address.id,
            wallet_discount=totals.wallet_discount if self.wallet_applied else None,
            wallet_coins_used=totals.wallet_coins_used if self.wallet_applied else None,
            items=lines or None,
        )

    async def place_order(
        self,
        orders_client: OrdersClient,
        wallet_client: WalletClient,
        *,
        user_id: int,
        address: Address,
        payment_method: PaymentMethod = PaymentMethod.COD,
        email: str = "",
        payment_id: Optional[str] = None,
        payment_order_id: Optional[str] = None,
    ) -> Order:
        """Create the order, then debit the coins it used.

        Order creation failures raise ``CheckoutError``. A failed coin redeem
        after the order exists is only logged: the order stays placed.
        """
        request = self.build_order(
            user_id=user_id,
            address=address,
            payment_method=payment_method,
            email=email,
            payment_id=payment_id,
            payment_order_id=payment_order_id,
        )

        try:
            order = await orders_client.create(request)
        except httpx.HTTPError as e:
            logger.error("Checkout error: %s", e)
            raise CheckoutError("Failed to process checkout. Please try again.") from e

        coins = request.wallet_coins_used or 0
        if coins > 0:
            try:
                await wallet_client.redeem(
                    coins=coins,
                    reference_id=str(order.id),
                    description=f"Used for order #{order.id}",
                )
                logger.info("Redeemed %d coins for order %s", coins, order.id)
            except httpx.HTTPError as e:
                logger.error(
                    "Failed to redeem %d coins for order %s: %s",
                    coins,
                    order.id,
                    e,
                    extra={"order_id": order.id, "coins": coins},
                )

        return order
