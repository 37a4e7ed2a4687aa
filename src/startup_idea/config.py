"""Environment configuration.

Every value comes from the environment (optionally via a `.env` file).
Missing secrets are kept as None: the pipeline reports them as structured
errors instead of failing at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from x402.http import DEFAULT_FACILITATOR_URL

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3022
DEFAULT_OPENAI_MODEL = "o4-mini"


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name, "").strip()
    return value or None


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the server and the pipeline.

    Attributes:
        biznews_server_url: MCP endpoint of the paid business-news server
        openai_api_key: Key for the analysis model
        evm_private_key: Hex private key paying on Base
        svm_private_key: Base58 keypair paying on Solana
        facilitator_url: x402 facilitator verifying and settling inbound payments
        evm_recipient_address: Payout address for inbound EVM payments
        svm_recipient_address: Payout address for inbound Solana payments
        testnet: Charge on Base Sepolia / Solana devnet instead of mainnets
        solana_rpc_url: RPC used to build outbound Solana payments
        openai_model: Model identifier for the analysis call
    """

    biznews_server_url: Optional[str] = None
    openai_api_key: Optional[str] = None
    evm_private_key: Optional[str] = None
    svm_private_key: Optional[str] = None
    facilitator_url: str = DEFAULT_FACILITATOR_URL
    evm_recipient_address: Optional[str] = None
    svm_recipient_address: Optional[str] = None
    testnet: bool = True
    solana_rpc_url: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"


def load_settings(dotenv: bool = True) -> Settings:
    """Read settings from the environment, loading `.env` first when asked."""
    if dotenv:
        load_dotenv()

    return Settings(
        biznews_server_url=_env("BIZNEWS_MCP_SERVER_URL"),
        openai_api_key=_env("OPENAI_API_KEY"),
        evm_private_key=_env("EVM_PRIVATE_KEY"),
        svm_private_key=_env("SVM_PRIVATE_KEY"),
        facilitator_url=_env("FACILITATOR_URL") or DEFAULT_FACILITATOR_URL,
        evm_recipient_address=_env("EVM_RECIPIENT_ADDRESS"),
        svm_recipient_address=_env("SVM_RECIPIENT_ADDRESS"),
        testnet=_env_bool("X402_TESTNET", True),
        solana_rpc_url=_env("SOLANA_RPC_URL"),
        openai_model=_env("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        host=_env("HOST") or DEFAULT_HOST,
        port=int(_env("PORT") or DEFAULT_PORT),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
    )
