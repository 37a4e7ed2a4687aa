"""MCP tool calls that pay for themselves over x402.

A paid MCP tool answers an unpaid call with an error result listing the
accepted payment requirements, either in `_meta["x402/error"]` or as the
result's structured content. The client picks a network, lets the x402
client sign a payment on it and repeats the call with the payment in the
request `_meta["x402/payment"]`.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, Optional, Sequence, Union

from mcp import ClientSession, types
from x402 import PaymentPayload, PaymentPayloadV1, PaymentRequired, PaymentRequiredV1, parse_payment_required, x402Client
from x402.http.utils import encode_payment_signature_header
from x402.mcp import MCP_PAYMENT_META_KEY, MCP_PAYMENT_RESPONSE_META_KEY

from .errors import PaymentDeclinedError
from .networks import Network, select_payment_network

logger = logging.getLogger(__name__)

PAYMENT_META_KEY = MCP_PAYMENT_META_KEY
PAYMENT_ERROR_META_KEY = "x402/error"
PAYMENT_RESPONSE_META_KEY = MCP_PAYMENT_RESPONSE_META_KEY

AnyPaymentRequired = Union[PaymentRequired, PaymentRequiredV1]
NetworkSelector = Callable[[Sequence[Any]], Optional[Network]]


def payment_required(result: types.CallToolResult) -> Optional[AnyPaymentRequired]:
    """Return the payment request carried by an error result, if any."""
    if not result.isError:
        return None
    body = (result.meta or {}).get(PAYMENT_ERROR_META_KEY)
    if not isinstance(body, dict):
        body = result.structuredContent
    if not isinstance(body, dict) or not body.get("accepts"):
        return None
    try:
        return parse_payment_required(body)
    except ValueError as exc:
        logger.warning("Ignoring malformed x402 payment request: %s", exc)
        return None


def payment_meta(payment: Union[PaymentPayload, PaymentPayloadV1]) -> Union[str, dict]:
    """The `_meta["x402/payment"]` value for a payment.

    Version 1 servers take the base64 header token, version 2 servers the
    payload object itself.
    """
    if payment.x402_version == 1:
        return encode_payment_signature_header(payment)
    return payment.model_dump(by_alias=True, exclude_none=True)


class PaymentClient:
    """Wraps an MCP ClientSession so paid tools are paid for transparently."""

    def __init__(
        self,
        session: ClientSession,
        payments: x402Client,
        select_network: NetworkSelector = select_payment_network,
    ):
        self._session = session
        self._payments = payments
        self._select_network = select_network

    async def call_tool(
        self,
        name: str,
        arguments: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> types.CallToolResult:
        """Call a tool, paying once if the server asks for payment."""
        result = await self._send(name, arguments, timeout)

        required = payment_required(result)
        if required is None:
            return result

        network = self._select_network(required.accepts)
        if network is None:
            raise PaymentDeclinedError(
                f"No acceptable payment network for tool '{name}': "
                + ", ".join(str(r.network) for r in required.accepts)
            )

        offered = [r for r in required.accepts if Network.parse(str(r.network)) is network]
        payment = await self._payments.create_payment_payload(required.model_copy(update={"accepts": offered}))
        logger.info("Paying %s on %s for tool '%s'", offered[0].pay_to, network.value, name)

        result = await self._send(name, arguments, timeout, meta={PAYMENT_META_KEY: payment_meta(payment)})

        settlement = (result.meta or {}).get(PAYMENT_RESPONSE_META_KEY)
        if settlement:
            logger.info("Payment for '%s' settled: %s", name, settlement)
        return result

    async def _send(
        self,
        name: str,
        arguments: Optional[dict[str, Any]],
        timeout: Optional[float],
        meta: Optional[dict[str, Any]] = None,
    ) -> types.CallToolResult:
        params = types.CallToolRequestParams(
            name=name,
            arguments=arguments or {},
            _meta=types.RequestParams.Meta.model_validate(meta) if meta else None,
        )
        request = types.ClientRequest(types.CallToolRequest(method="tools/call", params=params))
        return await self._session.send_request(
            request,
            types.CallToolResult,
            request_read_timeout_seconds=timedelta(seconds=timeout) if timeout is not None else None,
        )
