from .errors import InvalidValue


def check_identity(identity: str) -> str:
    """Validate a caller/grantee identity. Identities are compared exactly as given."""
    if not isinstance(identity, str):
        raise InvalidValue(f"identity must be a string, got {type(identity).__name__}")
    if not identity.strip():
        raise InvalidValue("identity cannot be empty")
    return identity
