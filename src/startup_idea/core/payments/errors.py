"""Payment errors. All of them propagate to the caller of the paid request.

x402's own failures (no matching requirements, unknown scheme, aborted
payment creation) share the same PaymentError base.
"""

from x402 import PaymentError

__all__ = ["PaymentError", "SignerError", "PaymentDeclinedError"]


class SignerError(PaymentError):
    """A secret could not be turned into a signer for its network."""


class PaymentDeclinedError(PaymentError):
    """None of the offered payment networks is acceptable."""
