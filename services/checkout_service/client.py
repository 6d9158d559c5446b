"""Remote orders client."""

from libs.common.api_client import ApiClient
from services.checkout_service.schemas import CreateOrderRequest, Order


class OrdersClient:
    def __init__(self, api: ApiClient):
        self.api = api

    async def create(self, request: CreateOrderRequest) -> Order:
        data = await self.api.post(
            "/orders",
            json=request.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
        return Order.model_validate(data)
