"""
Commands - the bank CLI, one module per group of commands:

- status:   connect and show bank name, owner and balance
- transfer: deposit and withdraw money in ETH
- rename:   set the bank name (owner only)
"""
