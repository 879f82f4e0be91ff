"""
Client-side sealing for registry files.

The registry only stores opaque bytes. This module is what a client runs
before submitting: it encrypts a file and its metadata under a fresh AES-256
key and wraps that key with RSA-OAEP for each recipient.

Layout of a sealed file:
- one random 12-byte IV shared by all fields
- one AES-GCM subkey per field, derived from the file key with HKDF-SHA256
  (info = field name), so the shared IV is never reused under the same key
- each field is ciphertext||tag as returned by AESGCM.encrypt
"""

from dataclasses import dataclass
import os

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from registry.models import FilePayload

FILE_KEY_SIZE = 32
IV_SIZE = 12

_FIELDS = ("ciphertext", "name", "folder", "kind")


@dataclass(frozen=True)
class SealedFile:
    payload: FilePayload
    wrapped_key: bytes  # file key wrapped for the owner


@dataclass(frozen=True)
class OpenedFile:
    plaintext: bytes
    name: str
    folder: str
    kind: str


# ============================================================================
# Key wrapping
# ============================================================================

def wrap_key_rsa_oaep(file_key: bytes, public_key_pem: bytes) -> bytes:
    """
    Wrap (encrypt) a symmetric file key with RSA-OAEP using the given PEM public key.
    """
    public_key = serialization.load_pem_public_key(public_key_pem)
    return public_key.encrypt(
        file_key,
        padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA256()),
            algorithm=hashes.SHA256(),
            label=None,
        ),
    )


def unwrap_key_rsa_oaep(wrapped_key: bytes, private_key_pem: bytes) -> bytes:
    """
    Unwrap (decrypt) a symmetric file key with RSA-OAEP using the given PEM private key.
    """
    private_key = serialization.load_pem_private_key(private_key_pem, password=None)
    return private_key.decrypt(
        wrapped_key,
        padding.OAEP(
            mgf=padding.MGF1(algorithm=hashes.SHA256()),
            algorithm=hashes.SHA256(),
            label=None,
        ),
    )


def rewrap_key(wrapped_key: bytes, private_key_pem: bytes, recipient_public_key_pem: bytes) -> bytes:
    """
    Re-wrap a file key for another recipient.

    This is what a holder does before calling `FileRegistry.grant`: unwrap
    their own copy of the key, then wrap it for the grantee.
    """
    file_key = unwrap_key_rsa_oaep(wrapped_key, private_key_pem)
    return wrap_key_rsa_oaep(file_key, recipient_public_key_pem)


# ============================================================================
# Field encryption
# ============================================================================

def _field_key(file_key: bytes, field: str) -> bytes:
    if len(file_key) != FILE_KEY_SIZE:
        raise ValueError("file key must be 256 bits")
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=FILE_KEY_SIZE,
        salt=None,
        info=field.encode("ascii"),
    )
    return hkdf.derive(file_key)


def encrypt_field(plaintext: bytes, file_key: bytes, iv: bytes, field: str) -> bytes:
    return AESGCM(_field_key(file_key, field)).encrypt(iv, plaintext, None)


def decrypt_field(ciphertext: bytes, file_key: bytes, iv: bytes, field: str) -> bytes:
    """Raises cryptography.exceptions.InvalidTag if the field was tampered with."""
    return AESGCM(_field_key(file_key, field)).decrypt(iv, ciphertext, None)


# ============================================================================
# Public operations
# ============================================================================

def seal_file(
    plaintext: bytes,
    name: str,
    owner_public_key_pem: bytes,
    *,
    folder: str = "",
    kind: str = "",
) -> SealedFile:
    """
    Encrypt a file and its metadata under a fresh key wrapped for the owner.

    Args:
        plaintext: File content
        name: Visible filename
        owner_public_key_pem: Owner's RSA public key (PEM)
        folder: Folder the owner files it under
        kind: Free-form file type, e.g. a MIME type

    Returns:
        SealedFile with the payload to submit and the owner's wrapped key
    """
    file_key = os.urandom(FILE_KEY_SIZE)
    iv = os.urandom(IV_SIZE)
    values = (plaintext, name.encode("utf-8"), folder.encode("utf-8"), kind.encode("utf-8"))
    ciphertext, enc_name, enc_folder, enc_kind = (
        encrypt_field(value, file_key, iv, field) for field, value in zip(_FIELDS, values)
    )
    payload = FilePayload(
        ciphertext=ciphertext,
        encrypted_name=enc_name,
        encrypted_folder=enc_folder,
        encrypted_kind=enc_kind,
        iv=iv,
    )
    return SealedFile(payload=payload, wrapped_key=wrap_key_rsa_oaep(file_key, owner_public_key_pem))


def open_file(payload: FilePayload, wrapped_key: bytes, private_key_pem: bytes) -> OpenedFile:
    """Decrypt a payload with a wrapped key addressed to `private_key_pem`."""
    file_key = unwrap_key_rsa_oaep(wrapped_key, private_key_pem)
    encrypted = (payload.ciphertext, payload.encrypted_name, payload.encrypted_folder, payload.encrypted_kind)
    plaintext, name, folder, kind = (
        decrypt_field(value, file_key, payload.iv, field) for field, value in zip(_FIELDS, encrypted)
    )
    return OpenedFile(
        plaintext=plaintext,
        name=name.decode("utf-8"),
        folder=folder.decode("utf-8"),
        kind=kind.decode("utf-8"),
    )
