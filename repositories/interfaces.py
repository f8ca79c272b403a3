"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
Every collection supports get/upsert/delete keyed by a string id; `get`
returning None is a normal outcome.
"""

from abc import ABC, abstractmethod


class IAccountRepository(ABC):
    @abstractmethod
    def get(self, user_id: str): ...

    @abstractmethod
    def upsert(self, account) -> None: ...

    @abstractmethod
    def delete(self, user_id: str) -> bool: ...


class ILeaderboardRepository(ABC):
    @abstractmethod
    def get(self, leaderboard_id: str): ...

    @abstractmethod
    def require(self, leaderboard_id: str): ...

    @abstractmethod
    def upsert(self, leaderboard) -> None: ...


class ILotteryRepository(ABC):
    @abstractmethod
    def get(self, lottery_id: str): ...

    @abstractmethod
    def require(self, lottery_id: str): ...

    @abstractmethod
    def upsert(self, lottery) -> None: ...


class IBetRepository(ABC):
    @abstractmethod
    def get(self, bet_id: str): ...

    @abstractmethod
    def upsert(self, bet) -> None: ...

    @abstractmethod
    def delete(self, bet_id: str) -> bool: ...


class ICancelTicketRepository(ABC):
    @abstractmethod
    def get(self, ticket_id: str): ...

    @abstractmethod
    def upsert(self, ticket) -> None: ...

    @abstractmethod
    def delete(self, ticket_id: str) -> bool: ...
