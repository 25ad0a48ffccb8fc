"""Unit of Work Interface

Owns the transaction boundary of a use case: repositories flush, the use
case commits once at the end or rolls back on failure.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
