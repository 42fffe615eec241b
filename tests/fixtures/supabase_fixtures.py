"""
In-memory stand-in for the Supabase async client.

Queries are recorded per table and answered from a FIFO of queued responses,
so a test arranges exactly what each `execute()` returns, in order.
"""

from collections import defaultdict
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, Mock

import pytest


class FakeQuery:
    """Records builder calls made on one table and serves a queued response."""

    def __init__(self, table: str, responses: List[Any]):
        self.table = table
        self.calls: List[Tuple[str, tuple, dict]] = []
        self._responses = responses

    def __getattr__(self, name: str):
        if name.startswith("__"):
            raise AttributeError(name)

        def builder(*args: Any, **kwargs: Any) -> "FakeQuery":
            self.calls.append((name, args, kwargs))
            return self

        return builder

    def called(self, name: str) -> List[Tuple[tuple, dict]]:
        """Arguments of every call to the named builder method."""
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]

    async def execute(self) -> SimpleNamespace:
        if not self._responses:
            raise AssertionError(f"No response queued for table '{self.table}'")
        result = self._responses.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


class FakeSupabase:
    def __init__(self) -> None:
        self.responses: Dict[str, List[Any]] = defaultdict(list)
        self.queries: List[FakeQuery] = []
        self.auth = Mock()
        self.auth.admin.create_user = AsyncMock()
        self.auth.admin.delete_user = AsyncMock()

    def queue(
        self,
        table: str,
        data: Optional[List[Dict[str, Any]]] = None,
        count: Optional[int] = None,
        error: Optional[BaseException] = None,
    ) -> None:
        """Queue the next response for a table, or an error to raise."""
        if error is not None:
            self.responses[table].append(error)
        else:
            self.responses[table].append(
                SimpleNamespace(data=data if data is not None else [], count=count)
            )

    def table(self, name: str) -> FakeQuery:
        query = FakeQuery(name, self.responses[name])
        self.queries.append(query)
        return query

    def queries_for(self, table: str) -> List[FakeQuery]:
        return [query for query in self.queries if query.table == table]


@pytest.fixture
def fake_db() -> FakeSupabase:
    """Fresh fake Supabase client with nothing queued."""
    return FakeSupabase()
