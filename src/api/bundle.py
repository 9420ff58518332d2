"""
Transfer preparation: bundle assembly, remainder insertion and input signing.

Entries are laid out outputs first, then one entry per input per security
level (the first carrying the negative balance), then the remainder. The
bundle hash is keccak-256 over the canonical JSON of all entries; every
input entry is signed over that hash with the key derived from the seed.
Any failure raises before anything is returned.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Sequence

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import keccak

from src.api.types import Input, PrepareTransfersOptions, Transfer, Trytes
from src.core.errors import (
    AddressGenerationError,
    InsufficientBalanceError,
    PrepareTransfersError,
)
from src.core.json_utils import canonical_bytes, canonical_dumps
from src.crypto.address import derive_private_key, generate_address
from src.infra.logging_cfg import log_event

log = logging.getLogger("account")


def _entry(address: str, value: int, tag: str, message: str, timestamp: int) -> Dict[str, Any]:
    return {
        "address": address.lower(),
        "value": value,
        "tag": tag,
        "message": message,
        "timestamp": timestamp,
        "signature": "",
    }


def prepare_transfers(
    seed: str,
    transfers: Sequence[Transfer],
    options: PrepareTransfersOptions,
) -> List[Trytes]:
    if not transfers:
        raise PrepareTransfersError("no transfers given")
    for t in transfers:
        if t.value < 0:
            raise PrepareTransfersError(f"negative transfer value for {t.address}")

    timestamp = options.timestamp if options.timestamp is not None else int(time.time())
    total = sum(t.value for t in transfers)

    entries: List[Dict[str, Any]] = [
        _entry(t.address, t.value, t.tag, t.message, timestamp) for t in transfers
    ]

    input_slots: List[tuple[int, Input]] = []
    if total > 0:
        if not options.inputs:
            raise PrepareTransfersError("value transfer requires inputs")
        available = sum(i.balance for i in options.inputs)
        if available < total:
            raise InsufficientBalanceError(required=total, available=available)

        for inp in options.inputs:
            input_slots.append((len(entries), inp))
            entries.append(_entry(inp.address, -inp.balance, "", "", timestamp))
            # extra signature fragments for higher security levels
            for _ in range(int(inp.security) - 1):
                entries.append(_entry(inp.address, 0, "", "", timestamp))

        remainder = available - total
        if remainder > 0:
            if not options.remainder_address:
                raise PrepareTransfersError(f"remainder of {remainder} requires a remainder address")
            entries.append(_entry(options.remainder_address, remainder, "", "", timestamp))

    for idx, entry in enumerate(entries):
        entry["current_index"] = idx
        entry["last_index"] = len(entries) - 1

    bundle_hash = keccak(canonical_bytes(entries))
    for entry in entries:
        entry["bundle"] = bundle_hash.hex()

    message = encode_defunct(primitive=bundle_hash)
    for idx, inp in input_slots:
        try:
            derived = generate_address(seed, inp.key_index, inp.security, add_checksum=False)
            key = derive_private_key(seed, inp.key_index, inp.security)
        except AddressGenerationError as exc:
            raise PrepareTransfersError(f"cannot derive key for input {inp.key_index}: {exc}") from exc
        if derived != inp.address.lower():
            raise PrepareTransfersError(
                f"input address {inp.address} does not belong to key index {inp.key_index}"
            )
        signed = Account.sign_message(message, private_key=key)
        entries[idx]["signature"] = signed.signature.hex()

    log_event(
        log,
        "transfers_prepared",
        level=logging.DEBUG,
        bundle=bundle_hash.hex(),
        entries=len(entries),
        inputs=len(input_slots),
        value=total,
    )
    return [canonical_dumps(entry) for entry in entries]
