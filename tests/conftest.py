"""Shared fixtures: record factories and a gateway whose calls the test settles by hand."""
import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from reviewdash.gateway.base import ResourceGateway
from reviewdash.gateway.errors import STATUS, GatewayError
from reviewdash.models import (
    Ack,
    AnalyzeMerchantsResponse,
    DetectPatternsResponse,
    Pattern,
    Transaction,
)


class ScriptedGateway(ResourceGateway):
    """
    In-test gateway. Results come from the public lists at the moment a call
    settles; hold() parks matching calls until the returned event is set and
    fail() makes them raise.
    """
    
    def __init__(self):
        self.transactions: List[Transaction] = []
        self.patterns: List[Pattern] = []
        self.analysis_result: List[Transaction] = []
        self.detection_result: List[Pattern] = []
        self.calls: List[Tuple[str, Optional[str]]] = []
        self._gates: Dict[Tuple[str, Optional[str]], asyncio.Event] = {}
        self._failures: Dict[Tuple[str, Optional[str]], Exception] = {}
        self.closed = False
    
    def hold(self, operation: str, key: Optional[str] = None) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates[(operation, key)] = gate
        return gate
    
    def fail(self, operation: str, key: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self._failures[(operation, key)] = error or GatewayError(operation, STATUS, status_code=500)
    
    def recover(self, operation: str, key: Optional[str] = None) -> None:
        self._failures.pop((operation, key), None)
    
    def operations(self) -> List[str]:
        return [op for op, _ in self.calls]
    
    async def _call(self, operation: str, key: Optional[str] = None) -> None:
        self.calls.append((operation, key))
        gate = self._gates.get((operation, key)) or self._gates.get((operation, None))
        if gate is not None:
            await gate.wait()
        error = self._failures.get((operation, key)) or self._failures.get((operation, None))
        if error is not None:
            raise error
    
    async def upload_file(self, file, filename=None) -> Ack:
        await self._call("upload_file")
        return Ack(message="ok")
    
    async def analyze_merchants(self) -> AnalyzeMerchantsResponse:
        await self._call("analyze_merchants")
        return AnalyzeMerchantsResponse(normalized_transactions=list(self.analysis_result))
    
    async def list_transactions(self) -> List[Transaction]:
        await self._call("list_transactions")
        return list(self.transactions)
    
    async def delete_transaction(self, transaction_id: str) -> Ack:
        await self._call("delete_transaction", transaction_id)
        return Ack()
    
    async def delete_all_transactions(self) -> Ack:
        await self._call("delete_all_transactions")
        return Ack()
    
    async def detect_patterns(self) -> DetectPatternsResponse:
        await self._call("detect_patterns")
        return DetectPatternsResponse(patterns=list(self.detection_result))
    
    async def list_patterns(self) -> List[Pattern]:
        await self._call("list_patterns")
        return list(self.patterns)
    
    async def delete_all_patterns(self) -> Ack:
        await self._call("delete_all_patterns")
        return Ack()
    
    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def gateway():
    return ScriptedGateway()


@pytest.fixture
def make_transaction():
    """Factory for normalized transactions."""
    def _make(tx_id: str, merchant: str = "Netflix", amount: str = "-15.49") -> Transaction:
        return Transaction(
            id=tx_id,
            original=f"{merchant.upper()} 866-579-7172",
            amount=amount,
            date="2024-01-15T10:30:00Z",
            normalized={
                "merchant": merchant,
                "category": "Entertainment",
                "sub_category": "Streaming",
                "confidence": 0.9,
                "is_subscription": True,
                "flags": ["recurring"],
            },
        )
    return _make


@pytest.fixture
def make_pattern():
    """Factory for detected patterns."""
    def _make(pattern_id: str, merchant: str = "Netflix") -> Pattern:
        return Pattern(
            id=pattern_id,
            type="subscription",
            merchant=merchant,
            amount="15.49",
            frequency="monthly",
            confidence=0.92,
            next_expected="2024-04-15T10:30:00Z",
            last_occurrence="2024-03-15T10:30:00Z",
            occurrence_count=3,
            is_active=True,
        )
    return _make


async def spin(times: int = 5) -> None:
    """Let every runnable task advance to its next real suspension point."""
    for _ in range(times):
        await asyncio.sleep(0)


@pytest.fixture
def settle():
    return spin
