"""
Use-case: list the interval names accepted by the distribution use-case.
"""

from src.domain.entities.distribution import Interval


class ListIntervalsUseCase:
    def execute(self) -> list[str]:
        return Interval.names()
