import re
from datetime import timedelta


class TimeParser:
    def __init__(self) -> None:
        self._units = {
            "s": "seconds",
            "m": "minutes",
            "h": "hours",
            "d": "days",
            "w": "weeks",
        }

    def parse(self, time_amount: str | int | float) -> float:
        if isinstance(time_amount, (int, float)):
            return float(time_amount)

        matches = list(
            re.finditer(
                r"(?P<val>\d+(\.\d+)?)(?P<unit>[smhdw]?)",
                time_amount,
                flags=re.I,
            )
        )

        if len(matches) == 0:
            raise ValueError(f"Invalid duration '{time_amount}'")

        amounts: dict[str, float] = {}
        for match in matches:
            unit = self._units.get(
                match.group("unit").lower(),
                "seconds",
            )

            amounts[unit] = amounts.get(unit, 0.0) + float(match.group("val"))

        return float(timedelta(**amounts).total_seconds())
