"""Domain models for settlement plans."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizedParticipant:
    """Participant with an amount in minor currency units (cents)."""

    name: str
    amount_cents: int
    index: int


@dataclass(frozen=True)
class Transfer:
    """A single payment from a debtor to a creditor.

    ``from_index`` and ``to_index`` point into the normalized participant list,
    so plans stay unambiguous when two participants share a name.
    """

    from_name: str
    to_name: str
    amount_cents: int
    from_index: int
    to_index: int

    @property
    def amount(self) -> float:
        return self.amount_cents / 100

    def to_dict(self) -> dict[str, object]:
        return {"from": self.from_name, "to": self.to_name, "amount": self.amount}


@dataclass(frozen=True)
class Settlement:
    """Fair shares and the transfer plan that reaches them."""

    participants: list[NormalizedParticipant]
    shares: list[int]
    transfers: list[Transfer]

    @property
    def total_cents(self) -> int:
        return sum(p.amount_cents for p in self.participants)
