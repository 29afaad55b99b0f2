"""Infrastructure layer: SDK adapters and the external secret provider.

This layer wraps solana-py/solders, web3.py, and the ``svpi`` subprocess.
It may import domain errors but never services, commands, or output.
"""
