from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from src.core.errors.exceptions import InstanceProcessingException

CENT = Decimal("0.01")
SHARE_SUM_TOLERANCE = Decimal("0.01")


@dataclass(slots=True, frozen=True)
class ExpenseShare:
    user_id: str
    amount: Decimal
    is_paid: bool = False


@dataclass(slots=True, frozen=True)
class UserBalance:
    user_id: str
    total_to_pay: Decimal
    is_paid: bool


def _to_decimal(value: Decimal | int | float | str) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _to_cents(value: Decimal | int | float | str) -> Decimal:
    amount = _to_decimal(value)
    if amount != amount.quantize(CENT):
        raise InstanceProcessingException(
            "Amounts cannot have more than two decimal places",
            additional_info={"amount": str(amount)},
        )
    return amount


def split_equally(
    amount: Decimal | int | float | str,
    participant_ids: Sequence[str],
    paid_by: str | None = None,
) -> list[ExpenseShare]:
    """
    Split ``amount`` evenly between participants, rounded to the cent.

    Cents lost to rounding go to the first participant, so the shares always
    add up to the original amount. The payer's own share is marked as paid.
    """
    if not participant_ids:
        raise InstanceProcessingException("An expense needs at least one participant")

    total = _to_cents(amount)
    if total <= 0:
        raise InstanceProcessingException("The amount must be positive")

    base_share = (total / len(participant_ids)).quantize(CENT, rounding=ROUND_DOWN)
    remainder = total - base_share * len(participant_ids)

    shares = []
    for index, user_id in enumerate(participant_ids):
        share_amount = base_share + remainder if index == 0 else base_share
        shares.append(
            ExpenseShare(
                user_id=user_id, amount=share_amount, is_paid=user_id == paid_by
            )
        )
    return shares


def build_custom_shares(
    amount: Decimal | int | float | str,
    shares: Mapping[str, Decimal | int | float | str],
    paid_by: str | None = None,
) -> list[ExpenseShare]:
    """
    Accept caller-provided shares when they add up to ``amount`` within one cent.
    """
    if not shares:
        raise InstanceProcessingException("An expense needs at least one participant")

    total = _to_cents(amount)
    parsed = {user_id: _to_cents(value) for user_id, value in shares.items()}
    if any(value <= 0 for value in parsed.values()):
        raise InstanceProcessingException("Every share must be positive")

    shares_sum = sum(parsed.values(), Decimal("0"))
    if abs(shares_sum - total) > SHARE_SUM_TOLERANCE:
        raise InstanceProcessingException(
            "The sum of the shares does not match the total amount",
            additional_info={"amount": str(total), "shares_sum": str(shares_sum)},
        )

    return [
        ExpenseShare(user_id=user_id, amount=value, is_paid=user_id == paid_by)
        for user_id, value in parsed.items()
    ]


def summarize_balances(shares: Iterable[ExpenseShare]) -> list[UserBalance]:
    """
    Aggregate the given shares per user, keeping first-seen user order.

    ``is_paid`` is true only when every share of that user is paid.
    """
    totals: dict[str, Decimal] = {}
    all_paid: dict[str, bool] = {}
    for share in shares:
        totals[share.user_id] = totals.get(share.user_id, Decimal("0")) + share.amount
        all_paid[share.user_id] = all_paid.get(share.user_id, True) and share.is_paid

    return [
        UserBalance(user_id=user_id, total_to_pay=total, is_paid=all_paid[user_id])
        for user_id, total in totals.items()
    ]
