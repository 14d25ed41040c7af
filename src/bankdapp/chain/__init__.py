"""
Chain - contract interaction layer for the bank.

ABI loading, value codecs, and the ChainClient that talks to the bank
contract through a wallet provider.

Uses eth-abi + eth-hash instead of the heavyweight web3.py.
"""
