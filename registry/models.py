from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple
import base64


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(data: str) -> bytes:
    return base64.b64decode(data)


@dataclass(frozen=True)
class FilePayload:
    """
    The encrypted content a client submits when creating a file.

    Every field is opaque to the registry: the ciphertext and the encrypted
    name/folder/kind are produced client-side, and `iv` is whatever
    initialization vector the client needs to decrypt them again.
    """
    ciphertext: bytes
    encrypted_name: bytes
    encrypted_folder: bytes
    encrypted_kind: bytes
    iv: bytes

    def lengths(self) -> Tuple[int, ...]:
        """Byte lengths of the billed fields."""
        return (
            len(self.ciphertext),
            len(self.encrypted_name),
            len(self.encrypted_folder),
            len(self.encrypted_kind),
            len(self.iv),
        )


@dataclass
class FileRecord:
    """
    A stored file. Only `access_holders` ever changes, and only by appending.

    Identity inside the registry is the record's position in the file arena,
    so there is no id field here.
    """

    ciphertext: bytes
    encrypted_name: bytes
    encrypted_folder: bytes
    encrypted_kind: bytes
    iv: bytes
    created_at: int
    created_block: int

    access_holders: List[str] = field(default_factory=list)

    @staticmethod
    def new(
        payload: FilePayload,
        creator: str,
        *,
        created_at: int,
        created_block: int,
    ) -> "FileRecord":
        return FileRecord(
            ciphertext=payload.ciphertext,
            encrypted_name=payload.encrypted_name,
            encrypted_folder=payload.encrypted_folder,
            encrypted_kind=payload.encrypted_kind,
            iv=payload.iv,
            created_at=created_at,
            created_block=created_block,
            access_holders=[creator],
        )

    @property
    def payload(self) -> FilePayload:
        return FilePayload(
            ciphertext=self.ciphertext,
            encrypted_name=self.encrypted_name,
            encrypted_folder=self.encrypted_folder,
            encrypted_kind=self.encrypted_kind,
            iv=self.iv,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ciphertext": _b64(self.ciphertext),
            "encrypted_name": _b64(self.encrypted_name),
            "encrypted_folder": _b64(self.encrypted_folder),
            "encrypted_kind": _b64(self.encrypted_kind),
            "iv": _b64(self.iv),
            "created_at": self.created_at,
            "created_block": self.created_block,
            "access_holders": list(self.access_holders),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileRecord":
        return cls(
            ciphertext=_unb64(data["ciphertext"]),
            encrypted_name=_unb64(data["encrypted_name"]),
            encrypted_folder=_unb64(data["encrypted_folder"]),
            encrypted_kind=_unb64(data["encrypted_kind"]),
            iv=_unb64(data["iv"]),
            created_at=data["created_at"],
            created_block=data["created_block"],
            access_holders=list(data.get("access_holders", [])),
        )


@dataclass(frozen=True)
class AccessKey:
    """
    Wrapped file key handed to one grantee.

    The grantee is implied by which identity's sequence holds the record.
    `grantor` is whoever paid for the grant; nothing checks that the grantor
    could decrypt the file themselves.
    """
    grantor: str
    file_index: int
    wrapped_key: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grantor": self.grantor,
            "file_index": self.file_index,
            "wrapped_key": _b64(self.wrapped_key),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccessKey":
        return cls(
            grantor=data["grantor"],
            file_index=data["file_index"],
            wrapped_key=_unb64(data["wrapped_key"]),
        )


@dataclass(frozen=True)
class AdminConfig:
    # admin capability
    owner: str

    # fee parameters
    base_fee: int = 0
    bytes_fee_multiplier: int = 0
    grant_fee: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "base_fee": self.base_fee,
            "bytes_fee_multiplier": self.bytes_fee_multiplier,
            "grant_fee": self.grant_fee,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdminConfig":
        return cls(
            owner=data["owner"],
            base_fee=data.get("base_fee", 0),
            bytes_fee_multiplier=data.get("bytes_fee_multiplier", 0),
            grant_fee=data.get("grant_fee", 0),
        )
