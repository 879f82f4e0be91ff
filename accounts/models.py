from dataclasses import dataclass, replace
from datetime import datetime, timezone


@dataclass(frozen=True)
class Account:
    # identity exactly as the registry sees it
    identity: str
    balance: int
    created_at: str   # ISO8601 "YYYY-MM-DDTHH:MM:SSZ"

    # constructor
    @staticmethod
    def new(identity: str, balance: int = 0) -> "Account":
        now = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")

        return Account(
            identity=identity,
            balance=balance,
            created_at=now,
        )

    def with_balance(self, balance: int) -> "Account":
        return replace(self, balance=balance)
