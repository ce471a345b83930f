"""
Direct Cancellation

An owner cancels orders by attaching a witness to the order group. The
witness input_type field carries the owner's lock script; it must hash
to the order lock args, and the signature check itself is delegated to
the host's SignatureAuthority.
"""

from typing import Optional, Protocol

from order_lock.chain.models import Script, WitnessArgs
from order_lock.chain.molecule import MoleculeError, UnknownHashTypeError
from order_lock.core.exceptions import (
    SignatureVerificationError,
    UnknownUserLockHashTypeError,
    UserLockHashNotMatchError,
    UserLockNotFoundError,
    UserLockScriptEncodingError,
    ValidationFunctionNotFoundError,
)
from order_lock.core.logging_config import get_logger

logger = get_logger()


class SignatureAuthority(Protocol):
    """Host collaborator that verifies the owner's signature"""

    def verify(self, user_lock: Script, witness: WitnessArgs) -> bool:
        ...


def load_user_lock(witness: WitnessArgs) -> Script:
    """
    Decode the owner's lock script carried in witness.input_type

    Raises:
        UserLockNotFoundError: input_type is empty
        UnknownUserLockHashTypeError: hash_type byte unknown
        UserLockScriptEncodingError: malformed script bytes
    """
    if witness.input_type is None:
        raise UserLockNotFoundError()

    try:
        return Script.unpack(witness.input_type)
    except UnknownHashTypeError as exc:
        raise UnknownUserLockHashTypeError(exc.value) from exc
    except MoleculeError as exc:
        raise UserLockScriptEncodingError(str(exc)) from exc


def verify_cancellation(
    witness: WitnessArgs,
    user_lock_hash: bytes,
    authority: Optional[SignatureAuthority] = None,
) -> Script:
    """
    Verify an owner-signed cancellation

    Args:
        witness: Witness of the first order group input
        user_lock_hash: Order lock args
        authority: Signature verifier for the owner's lock

    Returns:
        The owner's lock script

    Raises:
        CancellationError subclass on any failed step
    """
    user_lock = load_user_lock(witness)

    if user_lock.calc_hash() != user_lock_hash:
        raise UserLockHashNotMatchError()

    if authority is None:
        raise ValidationFunctionNotFoundError()

    if not authority.verify(user_lock, witness):
        raise SignatureVerificationError()

    logger.info("Order cancelled by owner signature")
    return user_lock
