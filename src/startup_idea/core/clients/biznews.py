"""Business-news client for a paid MCP tool on a remote server.

The `business_news` tool charges per call over x402. Payment is made on
Solana devnet when offered, otherwise on Base Sepolia.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from json import JSONDecodeError
from typing import Any, AsyncIterator, Optional

from mcp import ClientSession, types
from mcp.client.streamable_http import streamablehttp_client

from ..payments.client import PaymentClient
from ..payments.networks import Network, select_payment_network
from ..payments.signers import build_payment_client

logger = logging.getLogger(__name__)

CLIENT_NAME = "startup-idea-mcp-client"
CLIENT_VERSION = "1.0.0"

NEWS_TOOL = "business_news"
TOOL_CALL_TIMEOUT = 300.0

EVM_NETWORK = Network.BASE_SEPOLIA
SVM_NETWORK = Network.SOLANA_DEVNET


@asynccontextmanager
async def open_session(server_url: str) -> AsyncIterator[ClientSession]:
    """Connect and initialize an MCP session over streamable HTTP."""
    async with streamablehttp_client(server_url) as (read_stream, write_stream, _):
        async with ClientSession(
            read_stream,
            write_stream,
            client_info=types.Implementation(name=CLIENT_NAME, version=CLIENT_VERSION),
        ) as session:
            await session.initialize()
            yield session


def first_text(result: types.CallToolResult) -> str:
    """Text of the first text content block, or "" if there is none."""
    for block in result.content:
        if isinstance(block, types.TextContent):
            return block.text
    return ""


def parse_payload(text: str) -> Any:
    """Decode the tool's JSON text; undecodable text means no articles."""
    try:
        return json.loads(text or "{}")
    except JSONDecodeError:
        logger.warning("Business news payload is not JSON, treating as empty")
        return {}


async def fetch_business_news(
    server_url: Optional[str],
    evm_private_key: str,
    svm_private_key: str,
    solana_rpc_url: Optional[str] = None,
    timeout: float = TOOL_CALL_TIMEOUT,
) -> Any:
    """Call the paid `business_news` tool and return its decoded payload.

    Args:
        server_url: MCP endpoint of the news server.
        evm_private_key: Hex private key for Base Sepolia payments.
        svm_private_key: Base58 keypair for Solana devnet payments.
        solana_rpc_url: Optional RPC override for building Solana payments.
        timeout: Hard limit in seconds for each tool request.

    Returns:
        The raw payload, shape unknown. Connection, signer, payment and
        timeout errors are raised, not converted.
    """
    if not server_url:
        raise ValueError("BIZNEWS_MCP_SERVER_URL environment variable is required")

    async with open_session(server_url) as session:
        payments = build_payment_client(
            evm_private_key,
            svm_private_key,
            evm_network=EVM_NETWORK,
            svm_network=SVM_NETWORK,
            solana_rpc_url=solana_rpc_url,
        )
        client = PaymentClient(session, payments, select_network=select_payment_network)

        logger.info("Calling %s on %s", NEWS_TOOL, server_url)
        result = await client.call_tool(NEWS_TOOL, {}, timeout=timeout)

    text = first_text(result)
    logger.info("Text from business news server: %s", text)
    return parse_payload(text)
