"""Fair-share and minimal-transfer settlement for a participant list.

All arithmetic is done in integer cents. Shares differ by at most one cent,
with the leftover cents going to whoever paid the most, and debts are settled
greedily by matching the largest creditor with the largest debtor.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from expense_split.domain.sessions import Participant
from expense_split.domain.settlement import (
    NormalizedParticipant,
    Settlement,
    Transfer,
)


def to_cents(amount: object) -> int:
    """Convert a decimal amount to cents, rounding half away from zero."""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return 0
    if not value.is_finite():
        return 0
    return int((value * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> float:
    return cents / 100


def normalize_participants(
    participants: Sequence[Participant],
) -> list[NormalizedParticipant]:
    """Convert amounts to cents, drop negatives and name anonymous entries."""
    normalized: list[NormalizedParticipant] = []
    for position, participant in enumerate(participants):
        name = str(participant.name or "").strip() or f"Person {position + 1}"
        amount_cents = to_cents(participant.amount)
        if amount_cents < 0:
            continue
        normalized.append(
            NormalizedParticipant(
                name=name, amount_cents=amount_cents, index=len(normalized)
            )
        )
    return normalized


def _target_shares(normalized: list[NormalizedParticipant]) -> list[int]:
    count = len(normalized)
    if count == 0:
        return []
    total = sum(p.amount_cents for p in normalized)
    base_share = total // count
    remainder = total - base_share * count

    by_paid_desc = sorted(
        normalized, key=lambda p: (-p.amount_cents, p.name, p.index)
    )
    shares = [base_share] * count
    for participant in by_paid_desc[:remainder]:
        shares[participant.index] += 1
    return shares


def _greedy_transfers(
    normalized: list[NormalizedParticipant], shares: list[int]
) -> list[Transfer]:
    if len(normalized) <= 1:
        return []
    balances = [p.amount_cents - share for p, share in zip(normalized, shares)]
    creditors = sorted(
        (i for i, balance in enumerate(balances) if balance > 0),
        key=lambda i: -balances[i],
    )
    debtors = sorted(
        (i for i, balance in enumerate(balances) if balance < 0),
        key=lambda i: balances[i],
    )

    transfers: list[Transfer] = []
    d = c = 0
    while d < len(debtors) and c < len(creditors):
        debtor, creditor = debtors[d], creditors[c]
        amount = min(balances[creditor], -balances[debtor])
        if amount > 0:
            transfers.append(
                Transfer(
                    from_name=normalized[debtor].name,
                    to_name=normalized[creditor].name,
                    amount_cents=amount,
                    from_index=debtor,
                    to_index=creditor,
                )
            )
            balances[debtor] += amount
            balances[creditor] -= amount
        if balances[debtor] == 0:
            d += 1
        if balances[creditor] == 0:
            c += 1
    return transfers


def compute_target_shares(participants: Sequence[Participant]) -> list[int]:
    """Return each normalized participant's fair share in cents."""
    return _target_shares(normalize_participants(participants))


def compute_transfers(participants: Sequence[Participant]) -> list[Transfer]:
    """Return the greedy settlement plan for the participants."""
    normalized = normalize_participants(participants)
    return _greedy_transfers(normalized, _target_shares(normalized))


def compute_settlement(participants: Sequence[Participant]) -> Settlement:
    """Return shares and transfers computed from a single normalization."""
    normalized = normalize_participants(participants)
    shares = _target_shares(normalized)
    return Settlement(
        participants=normalized,
        shares=shares,
        transfers=_greedy_transfers(normalized, shares),
    )


def apply_transfers(
    participants: Sequence[Participant], transfers: Sequence[Transfer]
) -> list[int]:
    """Apply a transfer plan to the initial amounts and return final cents.

    A participant's net contribution grows by what they send and shrinks by
    what they receive.
    """
    amounts = [p.amount_cents for p in normalize_participants(participants)]
    for transfer in transfers:
        if not (
            0 <= transfer.from_index < len(amounts)
            and 0 <= transfer.to_index < len(amounts)
        ):
            continue
        amounts[transfer.from_index] += transfer.amount_cents
        amounts[transfer.to_index] -= transfer.amount_cents
    return amounts
