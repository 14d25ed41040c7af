"""
Session - the client-side lifecycle around the bank contract.

- errors:      failure taxonomy and classifier
- state:       the authoritative in-memory session snapshot
- coordinator: submit / confirm / refresh sequencing for transactions
- controller:  user intents, input parsing and owner gating
"""
