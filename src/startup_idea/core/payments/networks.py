"""Settlement networks and payment network selection.

Paid MCP servers name networks either the legacy way ("base-sepolia") or by
CAIP-2 id ("eip155:84532"). Both spellings map to the same Network.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional, Sequence

from x402.mechanisms.svm import SOLANA_DEVNET_CAIP2, SOLANA_MAINNET_CAIP2

logger = logging.getLogger(__name__)


class NetworkFamily(str, Enum):
    """Signer families."""

    EVM = "evm"
    SVM = "svm"


class Network(str, Enum):
    """Settlement networks, valued by their legacy x402 names."""

    BASE = "base"
    BASE_SEPOLIA = "base-sepolia"
    SOLANA = "solana"
    SOLANA_DEVNET = "solana-devnet"

    @property
    def caip2(self) -> str:
        return CAIP2_IDS[self]

    @property
    def family(self) -> NetworkFamily:
        return NETWORK_FAMILY[self]

    @classmethod
    def parse(cls, name: str) -> Optional["Network"]:
        """Network for a legacy name or CAIP-2 id, None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return _BY_CAIP2.get(name)


CAIP2_IDS: dict[Network, str] = {
    Network.BASE: "eip155:8453",
    Network.BASE_SEPOLIA: "eip155:84532",
    Network.SOLANA: SOLANA_MAINNET_CAIP2,
    Network.SOLANA_DEVNET: SOLANA_DEVNET_CAIP2,
}

_BY_CAIP2 = {caip2: network for network, caip2 in CAIP2_IDS.items()}

NETWORK_FAMILY: dict[Network, NetworkFamily] = {
    Network.BASE: NetworkFamily.EVM,
    Network.BASE_SEPOLIA: NetworkFamily.EVM,
    Network.SOLANA: NetworkFamily.SVM,
    Network.SOLANA_DEVNET: NetworkFamily.SVM,
}

# Lower value wins. Networks missing from the table are never selected.
NETWORK_PRIORITY: dict[Network, int] = {
    Network.SOLANA_DEVNET: 0,
    Network.BASE_SEPOLIA: 1,
}


def network_for(family: NetworkFamily, testnet: bool) -> Network:
    """The network a recipient of the given family is paid on."""
    if family is NetworkFamily.EVM:
        return Network.BASE_SEPOLIA if testnet else Network.BASE
    return Network.SOLANA_DEVNET if testnet else Network.SOLANA


def select_payment_network(
    accepts: Sequence[Any],
    priority: Optional[dict[Network, int]] = None,
) -> Optional[Network]:
    """Pick the preferred network among the offered payment requirements.

    `accepts` holds x402 requirement models (v1 or v2); only their `network`
    is read. Returns None when no offered network is in the priority table,
    which the paying client treats as declining the payment.
    """
    table = NETWORK_PRIORITY if priority is None else priority
    candidates = []
    for requirement in accepts:
        network = Network.parse(str(requirement.network))
        if network is not None and network in table:
            candidates.append(network)

    if not candidates:
        logger.warning("No acceptable payment network among %s", [str(r.network) for r in accepts])
        return None
    return min(candidates, key=lambda n: table[n])
