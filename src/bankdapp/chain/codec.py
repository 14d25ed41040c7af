"""
Codecs for values crossing the contract boundary.

- bytes32 strings: UTF-8, right-padded with zero bytes to 32 bytes
- monetary amounts: base-unit integers with 18 decimals, converted from and
  to decimal strings with integer arithmetic only (no float rounding drift)
- ABI calls: 4-byte keccak selector plus eth-abi encoded arguments
"""

from __future__ import annotations

import re
from typing import Any

from eth_abi import decode, encode
from eth_hash.auto import keccak

from ..session.errors import ValidationError

BYTES32_LENGTH = 32
ETHER_DECIMALS = 18
WEI_PER_ETHER = 10**ETHER_DECIMALS
UINT256_MAX = 2**256 - 1
# uint256 has at most 78 decimal digits
MAX_WHOLE_DIGITS = len(str(UINT256_MAX))

_DECIMAL_RE = re.compile(r"^(?P<whole>[0-9]*)(?:\.(?P<frac>[0-9]*))?$")


# ============ bytes32 strings ============


def encode_bytes32(text: str) -> bytes:
    """Encode a string into a zero-padded 32-byte slot."""
    raw = text.encode("utf-8")
    if len(raw) > BYTES32_LENGTH:
        raise ValidationError(
            f"Name is {len(raw)} bytes long; at most {BYTES32_LENGTH} bytes fit."
        )
    return raw.ljust(BYTES32_LENGTH, b"\x00")


def decode_bytes32(raw: bytes) -> str:
    """Decode a zero-padded 32-byte slot, trimming the trailing padding."""
    if len(raw) != BYTES32_LENGTH:
        raise ValidationError(f"Expected {BYTES32_LENGTH} bytes, got {len(raw)}")
    try:
        return raw.rstrip(b"\x00").decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValidationError(f"Name is not valid UTF-8: {exc}") from exc


# ============ Monetary amounts ============


def to_base_units(amount: str, decimals: int = ETHER_DECIMALS) -> int:
    """
    Parse a non-negative decimal string into base units.

    "0.5" -> 500000000000000000. More fractional digits than `decimals`
    is rejected rather than rounded.
    """
    match = _DECIMAL_RE.match(amount.strip())
    if match is None:
        raise ValidationError(f"Not a non-negative decimal amount: {amount!r}")

    whole = match.group("whole")
    frac = match.group("frac") or ""
    if not whole and not frac:
        raise ValidationError(f"Not a non-negative decimal amount: {amount!r}")
    if len(frac) > decimals:
        raise ValidationError(
            f"Amount {amount!r} has more than {decimals} fractional digits"
        )

    whole = whole.lstrip("0")
    if len(whole) > MAX_WHOLE_DIGITS:
        raise ValidationError(f"Amount {amount!r} does not fit in uint256")

    value = int(whole or "0") * 10**decimals + int(frac.ljust(decimals, "0") or "0")
    if value > UINT256_MAX:
        raise ValidationError(f"Amount {amount!r} does not fit in uint256")
    return value


def to_decimal_string(value: int, decimals: int = ETHER_DECIMALS) -> str:
    """Format base units as a canonical decimal string ("1.0", "0.05")."""
    if value < 0:
        raise ValidationError(f"Negative amount: {value}")
    whole, frac = divmod(value, 10**decimals)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0") or "0"
    return f"{whole}.{frac_text}"


def canonical_decimal(amount: str, decimals: int = ETHER_DECIMALS) -> str:
    """Canonical form of a decimal string; equals to_decimal_string(to_base_units(s))."""
    match = _DECIMAL_RE.match(amount.strip())
    if match is None or not (match.group("whole") or match.group("frac")):
        raise ValidationError(f"Not a non-negative decimal amount: {amount!r}")
    whole = (match.group("whole") or "0").lstrip("0") or "0"
    frac = (match.group("frac") or "").rstrip("0") or "0"
    return f"{whole}.{frac}"


# ============ Addresses ============


def normalize_address(address: str) -> str:
    """Lowercase 0x-prefixed form used for comparisons."""
    addr = str(address).strip().lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr
    if not re.fullmatch(r"0x[0-9a-f]{40}", addr):
        raise ValidationError(f"Not an address: {address!r}")
    return addr


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = normalize_address(address)[2:]
    addr_hash = keccak(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


# ============ ABI ============


def _find_function(abi: list, function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def encode_call(abi: list, function_name: str, args: list) -> str:
    """ABI-encode a function call to 0x-prefixed hex calldata."""
    func = _find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    sig = f"{function_name}({','.join(input_types)})"

    # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
    selector = keccak(sig.encode("utf-8"))[:4]
    encoded_args = encode(input_types, args) if args else b""

    return "0x" + selector.hex() + encoded_args.hex()


def decode_result(abi: list, function_name: str, data: str) -> Any:
    """ABI-decode a call result; single outputs are unwrapped."""
    func = _find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    if not data or data == "0x":
        raise ValidationError(f"Empty result for {function_name}()")
    raw = bytes.fromhex(data[2:] if data.startswith("0x") else data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded
