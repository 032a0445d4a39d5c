"""In-memory gateway for offline demos and tests without a backend."""
import asyncio
import csv
import io
import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional
from reviewdash.gateway.base import ResourceGateway, UploadSource, resolve_upload
from reviewdash.gateway.errors import STATUS, GatewayError
from reviewdash.models import (
    Ack,
    AnalyzeMerchantsResponse,
    DetectPatternsResponse,
    NormalizedInfo,
    Pattern,
    Transaction,
)
from reviewdash.utils.timestamp import parse_timestamp

logger = logging.getLogger(__name__)


class InMemoryGateway(ResourceGateway):
    """Deterministic stand-in for the backend.
    
    Holds the "server-side" store itself, so it is the one gateway with state.
    Normalization and detection are canned rules, not the real algorithms.
    """
    
    # keyword in raw description -> (merchant, category, sub_category, is_subscription)
    MERCHANT_RULES = {
        "NETFLIX": ("Netflix", "Entertainment", "Streaming", True),
        "SPOTIFY": ("Spotify", "Entertainment", "Music", True),
        "AMZN": ("Amazon", "Shopping", "Online Marketplace", False),
        "AMAZON": ("Amazon", "Shopping", "Online Marketplace", False),
        "STARBUCKS": ("Starbucks", "Food & Dining", "Coffee Shops", False),
        "UBER": ("Uber", "Transportation", "Rideshare", False),
        "WHOLEFDS": ("Whole Foods", "Groceries", "Supermarkets", False),
        "PLANET FITNESS": ("Planet Fitness", "Health & Fitness", "Gym", True),
    }
    
    SAMPLE_ROWS = [
        ("NETFLIX.COM 866-579-7172 CA", "-15.49", "2024-01-15T10:30:00Z"),
        ("NETFLIX.COM 866-579-7172 CA", "-15.49", "2024-02-15T10:30:00Z"),
        ("NETFLIX.COM 866-579-7172 CA", "-15.49", "2024-03-15T10:30:00Z"),
        ("SPOTIFY USA 877-778-1161", "-10.99", "2024-01-03T08:00:00Z"),
        ("SPOTIFY USA 877-778-1161", "-10.99", "2024-02-03T08:00:00Z"),
        ("STARBUCKS STORE #1234", "-5.20", "2024-02-05T07:45:00Z"),
        ("STARBUCKS STORE #1234", "-5.20", "2024-02-12T07:51:00Z"),
        ("AMZN MKTP US*2K4L91", "-42.17", "2024-02-08T19:12:00Z"),
        ("PAYROLL ACME CORP", "2500.00", "2024-02-01T00:00:00Z"),
    ]
    
    def __init__(
        self,
        *,
        seed: bool = True,
        latency: float = 0.0,
        fail_on: Optional[Iterable[str]] = None,
    ):
        """
        Args:
            seed: Preload the store with a few unprocessed sample transactions
            latency: Seconds every call sleeps before answering
            fail_on: Operation names that answer with a 500 instead
        """
        self.latency = latency
        self.fail_on = set(fail_on or ())
        self._transactions: Dict[str, Transaction] = {}
        self._patterns: Dict[str, Pattern] = {}
        self._next_id = 1
        if seed:
            for description, amount, date in self.SAMPLE_ROWS:
                self._add_raw(description, Decimal(amount), parse_timestamp(date))
    
    def _new_id(self, prefix: str) -> str:
        value = f"{prefix}_{self._next_id}"
        self._next_id += 1
        return value
    
    def _add_raw(self, description: str, amount: Decimal, date: Optional[datetime]) -> Transaction:
        tx = Transaction(id=self._new_id("tx"), original=description, amount=amount, date=date)
        self._transactions[tx.id] = tx
        return tx
    
    async def _answer(self, operation: str) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        if operation in self.fail_on:
            raise GatewayError(operation, STATUS, status_code=500, detail="Simulated backend failure")
    
    def _normalize(self, description: str) -> NormalizedInfo:
        upper = description.upper()
        for keyword, (merchant, category, sub_category, is_subscription) in self.MERCHANT_RULES.items():
            if keyword in upper:
                flags = {"recurring"} if is_subscription else set()
                return NormalizedInfo(
                    merchant=merchant,
                    category=category,
                    sub_category=sub_category,
                    confidence=0.95,
                    is_subscription=is_subscription,
                    flags=flags,
                )
        words = [w for w in description.split() if w.isalpha()]
        merchant = " ".join(words[:2]).title() if words else description.strip()
        return NormalizedInfo(
            merchant=merchant,
            category="Uncategorized",
            sub_category="",
            confidence=0.4,
            flags={"needs_review"},
        )
    
    async def upload_file(self, file: UploadSource, filename: Optional[str] = None) -> Ack:
        name, content = resolve_upload(file, filename)
        await self._answer("upload_file")
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise GatewayError("upload_file", STATUS, status_code=400, detail="File must be UTF-8 CSV") from e
        
        count = 0
        for row in csv.DictReader(io.StringIO(text)):
            description = (row.get("description") or "").strip()
            try:
                amount = Decimal((row.get("amount") or "").strip())
                date = parse_timestamp(row["date"]) if row.get("date") else None
            except (InvalidOperation, ValueError) as e:
                logger.debug("Skipping invalid row: %s", e)
                continue
            if not description:
                continue
            self._add_raw(description, amount, date)
            count += 1
        
        if not count:
            raise GatewayError("upload_file", STATUS, status_code=400, detail="No valid transactions found in file")
        logger.info("Ingested upload", extra={"upload_name": name, "transaction_count": count})
        return Ack(message=f"Successfully uploaded {count} transactions", transaction_count=count)
    
    async def analyze_merchants(self) -> AnalyzeMerchantsResponse:
        await self._answer("analyze_merchants")
        for tx_id, tx in list(self._transactions.items()):
            if tx.normalized is None:
                self._transactions[tx_id] = tx.model_copy(update={"normalized": self._normalize(tx.original or "")})
        return AnalyzeMerchantsResponse(normalized_transactions=list(self._transactions.values()))
    
    async def list_transactions(self) -> List[Transaction]:
        await self._answer("list_transactions")
        return list(self._transactions.values())
    
    async def delete_transaction(self, transaction_id: str) -> Ack:
        await self._answer("delete_transaction")
        if self._transactions.pop(str(transaction_id), None) is None:
            raise GatewayError("delete_transaction", STATUS, status_code=404, detail=f"Unknown transaction {transaction_id}")
        return Ack(message="Transaction deleted")
    
    async def delete_all_transactions(self) -> Ack:
        await self._answer("delete_all_transactions")
        count = len(self._transactions)
        self._transactions.clear()
        return Ack(message=f"Deleted {count} transactions")
    
    async def detect_patterns(self) -> DetectPatternsResponse:
        await self._answer("detect_patterns")
        groups = defaultdict(list)
        for tx in self._transactions.values():
            if tx.normalized is not None and tx.date is not None and tx.amount < 0:
                groups[tx.normalized.merchant].append(tx)
        
        self._patterns = {}
        for merchant, txs in sorted(groups.items()):
            if len(txs) < 2:
                continue
            txs.sort(key=lambda t: t.date)
            pattern = self._build_pattern(merchant, txs)
            self._patterns[pattern.id] = pattern
        return DetectPatternsResponse(patterns=list(self._patterns.values()))
    
    def _build_pattern(self, merchant: str, txs: List[Transaction]) -> Pattern:
        gaps = [(b.date - a.date).days for a, b in zip(txs, txs[1:])]
        avg_gap = sum(gaps) / len(gaps)
        if avg_gap <= 10:
            frequency = "weekly"
        elif avg_gap <= 40:
            frequency = "monthly"
        elif avg_gap <= 100:
            frequency = "quarterly"
        else:
            frequency = "yearly"
        
        total = sum((abs(t.amount) for t in txs), Decimal("0"))
        last = txs[-1].date
        next_expected = last + timedelta(days=round(avg_gap))
        is_subscription = any(t.normalized.is_subscription for t in txs)
        return Pattern(
            id=self._new_id("pat"),
            type="subscription" if is_subscription else "recurring",
            merchant=merchant,
            amount=(total / len(txs)).quantize(Decimal("0.01")),
            frequency=frequency,
            confidence=min(1.0, 0.5 + 0.15 * len(txs)),
            next_expected=next_expected,
            last_occurrence=last,
            occurrence_count=len(txs),
            is_active=next_expected >= datetime.now(timezone.utc) - timedelta(days=round(avg_gap)),
        )
    
    async def list_patterns(self) -> List[Pattern]:
        await self._answer("list_patterns")
        return list(self._patterns.values())
    
    async def delete_all_patterns(self) -> Ack:
        await self._answer("delete_all_patterns")
        count = len(self._patterns)
        self._patterns.clear()
        return Ack(message=f"Deleted {count} patterns")
