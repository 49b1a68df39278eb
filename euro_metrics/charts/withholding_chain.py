import re
from dataclasses import dataclass
from typing import List, Optional, Union

AMOUNT_PATTERN = re.compile(r"\(([^)]+)\)")
WITHHOLD_ALL = "all"


@dataclass(frozen=True)
class ChainParticipant:
    icons: List[str]
    withheld: Optional[float]
    money: float


def _starting_capital(capital: Optional[Union[str, float]]) -> float:
    if capital in (None, ""):
        return 1.0
    try:
        value = float(capital)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid starting capital {capital!r}") from exc
    return value or 1.0


def _withheld_amount(raw: Optional[str], money: float) -> Optional[float]:
    if raw is None:
        return None
    if raw == WITHHOLD_ALL:
        return money
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid withheld amount {raw!r}") from exc


def parse_withholding_chain(
    participants: str, capital: Optional[Union[str, float]] = None
) -> List[ChainParticipant]:
    """Parse ``"icon1:icon2(0.3), icon3(all), icon4"`` into a withholding chain.

    Each participant withholds the amount in parentheses (or everything left,
    for ``all``) and passes the remainder on. ``money`` is what remains after
    that participant has withheld its share.
    """
    money = _starting_capital(capital)
    chain: List[ChainParticipant] = []
    for participant in participants.replace(" ", "").split(","):
        if not participant:
            continue
        match = AMOUNT_PATTERN.search(participant)
        withheld = _withheld_amount(match.group(1) if match else None, money)
        money -= withheld or 0.0
        icons = AMOUNT_PATTERN.sub("", participant, count=1).split(":")
        chain.append(ChainParticipant(icons=icons, withheld=withheld, money=money))
    return chain
