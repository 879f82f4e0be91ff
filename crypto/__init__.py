"""Client-side cryptography for preparing registry submissions."""

from .envelope import (
    SealedFile,
    OpenedFile,
    seal_file,
    open_file,
    rewrap_key,
    wrap_key_rsa_oaep,
    unwrap_key_rsa_oaep,
)

from .keys import generate_key_pair

__all__ = [
    # Envelope
    "SealedFile",
    "OpenedFile",
    "seal_file",
    "open_file",
    "rewrap_key",
    "wrap_key_rsa_oaep",
    "unwrap_key_rsa_oaep",
    # Keys
    "generate_key_pair",
]
