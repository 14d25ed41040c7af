"""
Wallet - the provider side of the bank client.

Provides the EIP-1193 provider protocol, a JSON-RPC node transport, and a
local signing provider backed by an eth-account key.
"""
