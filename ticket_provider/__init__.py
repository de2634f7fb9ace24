"""DSNP interaction ticket provider.

Issues signed verifiable credentials ("interaction tickets") for off-chain
interactions that pass an entitlement check and order corroboration.
"""

__version__ = "0.1.0"
