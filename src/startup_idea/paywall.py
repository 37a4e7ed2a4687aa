"""x402 paywall for MCP tools.

Unpaid calls get an error result listing what the tool accepts, both as
structured content and in `_meta["x402/error"]`. Paid calls carry an x402
payment in the request `_meta["x402/payment"]`; the payment is verified by
the facilitator, the tool runs, and the payment is settled before the
result is returned.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx
from mcp import types
from x402 import (
    FacilitatorCapabilityError,
    FacilitatorClient,
    PaymentError,
    PaymentRequirements,
    ResourceConfig,
    ResourceInfo,
    x402ResourceServer,
)
from x402.http import FacilitatorConfig, HTTPFacilitatorClient
from x402.mcp import create_payment_wrapper
from x402.mechanisms.evm.exact import ExactEvmServerScheme
from x402.mechanisms.svm.exact import ExactSvmServerScheme

from .config import Settings
from .core.payments.client import PAYMENT_ERROR_META_KEY
from .core.payments.networks import Network, NetworkFamily, network_for

logger = logging.getLogger(__name__)

PAYMENT_TIMEOUT_SECONDS = 300

SERVER_SCHEMES = {
    NetworkFamily.EVM: ExactEvmServerScheme,
    NetworkFamily.SVM: ExactSvmServerScheme,
}

# Raised while asking the facilitator what it supports or pricing against it.
FACILITATOR_ERRORS = (httpx.HTTPError, ValueError, RuntimeError, PaymentError, FacilitatorCapabilityError)

ToolHandler = Callable[[], Awaitable[Any]]


def text_result(payload: Any, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=json.dumps(payload, ensure_ascii=False, allow_nan=False))],
        isError=is_error,
    )


class Paywall:
    """Charges a fixed USDC price per tool call to the configured recipients.

    The facilitator's supported payment kinds are fetched on the first call
    and kept for the life of the paywall. A failed fetch is not kept: that
    call gets an error result and the next call asks again.
    """

    def __init__(self, settings: Settings, facilitator: Optional[FacilitatorClient] = None):
        self.settings = settings
        self.recipients = self._recipients()
        self.resource_server = x402ResourceServer(
            facilitator or HTTPFacilitatorClient(FacilitatorConfig(url=settings.facilitator_url))
        )
        for network, _ in self.recipients:
            self.resource_server.register(network.caip2, SERVER_SCHEMES[network.family]())

        self._initialized = False
        self._lock = asyncio.Lock()
        self._accepts: dict[str, list[PaymentRequirements]] = {}

    def _recipients(self) -> list[tuple[Network, str]]:
        recipients = []
        if self.settings.evm_recipient_address:
            recipients.append((network_for(NetworkFamily.EVM, self.settings.testnet), self.settings.evm_recipient_address))
        if self.settings.svm_recipient_address:
            recipients.append((network_for(NetworkFamily.SVM, self.settings.testnet), self.settings.svm_recipient_address))
        return recipients

    async def requirements(self, price: str) -> list[PaymentRequirements]:
        """Payment requirements for every configured recipient, built once per price."""
        async with self._lock:
            if not self._initialized:
                await asyncio.to_thread(self.resource_server.initialize)
                self._initialized = True
                logger.info("x402 facilitator ready at %s", self.settings.facilitator_url)

            if price not in self._accepts:
                accepts = []
                for network, pay_to in self.recipients:
                    accepts.extend(self.resource_server.build_payment_requirements(ResourceConfig(
                        scheme="exact",
                        network=network.caip2,
                        pay_to=pay_to,
                        price=price,
                        max_timeout_seconds=PAYMENT_TIMEOUT_SECONDS,
                    )))
                self._accepts[price] = accepts
            return self._accepts[price]

    async def charge(
        self,
        ctx: Any,
        handler: ToolHandler,
        *,
        price: str,
        resource: str,
        description: str = "",
    ) -> types.CallToolResult:
        """Run `handler` only if the request in `ctx` carries a valid payment of `price`.

        The handler's payload is returned as JSON text. Handler exceptions
        come back as an error result and the payment is not settled.
        """
        if not self.recipients:
            logger.error("No payment recipient configured for %s", resource)
            return text_result(
                {"error": "No payment recipient configured (EVM_RECIPIENT_ADDRESS / SVM_RECIPIENT_ADDRESS)"},
                is_error=True,
            )

        try:
            accepts = await self.requirements(price)
        except FACILITATOR_ERRORS as exc:
            logger.error("Cannot price %s, facilitator unavailable: %s", resource, exc)
            return text_result({"error": f"Payment facilitator unavailable: {exc}"}, is_error=True)

        async def respond() -> str:
            return json.dumps(await handler(), ensure_ascii=False, allow_nan=False)

        paid = create_payment_wrapper(
            self.resource_server,
            accepts=accepts,
            resource=ResourceInfo(url=resource, description=description, mime_type="application/json"),
        )(respond)
        result = await paid(ctx=ctx)

        body = result.structuredContent
        if result.isError and isinstance(body, dict) and "accepts" in body:
            logger.info("Payment required for %s: %s", resource, body.get("error"))
            result.meta = {**(result.meta or {}), PAYMENT_ERROR_META_KEY: body}
        return result
