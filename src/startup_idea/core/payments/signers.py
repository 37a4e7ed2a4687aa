"""Payment signers built from secrets, registered on an x402 client.

EVM secrets are hex private keys, SVM secrets base58-encoded 64-byte
keypairs. The x402 `exact` schemes do the signing.
"""

from __future__ import annotations

import logging
from typing import Optional

import base58
from eth_account import Account
from solders.keypair import Keypair
from x402 import x402Client
from x402.mechanisms.evm import EthAccountSigner
from x402.mechanisms.evm.exact import register_exact_evm_client
from x402.mechanisms.svm import KeypairSigner
from x402.mechanisms.svm.exact import register_exact_svm_client

from .errors import SignerError
from .networks import Network

logger = logging.getLogger(__name__)


def evm_signer(private_key: str) -> EthAccountSigner:
    try:
        return EthAccountSigner(Account.from_key(private_key))
    except Exception as exc:
        raise SignerError(f"Failed to create EVM signer: {exc}") from exc


def svm_signer(secret: str) -> KeypairSigner:
    # Decoded first: solders panics instead of raising on malformed base58.
    try:
        return KeypairSigner(Keypair.from_bytes(base58.b58decode(secret)))
    except ValueError as exc:
        raise SignerError(f"Failed to create SVM signer: {exc}") from exc


def build_payment_client(
    evm_private_key: str,
    svm_private_key: str,
    evm_network: Network = Network.BASE_SEPOLIA,
    svm_network: Network = Network.SOLANA_DEVNET,
    solana_rpc_url: Optional[str] = None,
) -> x402Client:
    """An x402 client that can pay on one EVM and one SVM network.

    Both secrets are turned into signers before anything is registered, so an
    invalid secret raises SignerError without side effects.
    """
    evm = evm_signer(evm_private_key)
    svm = svm_signer(svm_private_key)

    client = x402Client()
    register_exact_evm_client(client, evm, networks=evm_network.caip2)
    register_exact_svm_client(client, svm, networks=svm_network.caip2, rpc_url=solana_rpc_url)

    logger.debug("Payment signers ready: %s on %s, %s on %s", evm.address, evm_network.value, svm.address, svm_network.value)
    return client
