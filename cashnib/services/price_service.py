"""Market price providers used to refresh investment valuations."""
from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import requests

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = (3, 30)


@dataclass
class PriceConfig:
    provider: str
    base_url: Optional[str] = None
    api_key: Optional[str] = None

    @classmethod
    def from_env(cls) -> "PriceConfig":
        provider = (os.getenv("PRICE_PROVIDER") or "disabled").strip().lower()
        if provider == "http":
            return cls(
                provider=provider,
                base_url=os.getenv("PRICE_API_BASE"),
                api_key=os.getenv("PRICE_API_KEY"),
            )
        if provider == "mock":
            return cls(provider=provider)
        if provider in {"disabled", "none", "off", ""}:
            return cls(provider="disabled")
        logger.warning("Unknown PRICE_PROVIDER '%s'; price refresh disabled.", provider)
        return cls(provider="disabled")

    @property
    def is_enabled(self) -> bool:
        if self.provider == "disabled":
            return False
        if self.provider == "http" and not self.base_url:
            logger.warning("PRICE_API_BASE must be set for the http price provider; disabling provider.")
            return False
        return True


class BasePriceProvider:
    def quote(self, symbol: str) -> Optional[float]:
        raise NotImplementedError

    def quotes(self, symbols: Iterable[str]) -> Dict[str, float]:
        result: Dict[str, float] = {}
        for symbol in symbols:
            price = self.quote(symbol)
            if price is not None:
                result[symbol] = price
        return result


class MockPriceProvider(BasePriceProvider):
    """Deterministic quotes derived from the symbol, for demos and tests."""

    def quote(self, symbol: str) -> Optional[float]:
        digest = hashlib.sha256(symbol.upper().encode("utf-8")).digest()
        cents = int.from_bytes(digest[:4], "big") % 100000
        return round(10 + cents / 100, 2)


class HttpPriceProvider(BasePriceProvider):
    """Fetch quotes from `GET {base_url}/quote?symbols=A,B` returning `{"A": 1.0}`."""

    def __init__(self, base_url: str, api_key: Optional[str] = None) -> None:
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def quotes(self, symbols: Iterable[str]) -> Dict[str, float]:
        wanted = sorted({s.upper() for s in symbols})
        if not wanted:
            return {}
        response = requests.get(
            f"{self.base_url}/quote",
            params={"symbols": ",".join(wanted)},
            headers=self._headers(),
            timeout=_DEFAULT_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise RuntimeError("Unexpected price provider response structure")
        result: Dict[str, float] = {}
        for symbol in wanted:
            value = payload.get(symbol)
            if isinstance(value, (int, float)) and value >= 0:
                result[symbol] = float(value)
        return result

    def quote(self, symbol: str) -> Optional[float]:
        return self.quotes([symbol]).get(symbol.upper())


class PriceService:
    def __init__(self, config: Optional[PriceConfig] = None) -> None:
        self.config = config or PriceConfig.from_env()
        self._provider = self._build_provider()

    def _build_provider(self) -> Optional[BasePriceProvider]:
        if not self.config.is_enabled:
            return None
        if self.config.provider == "http":
            return HttpPriceProvider(self.config.base_url, self.config.api_key)
        if self.config.provider == "mock":
            return MockPriceProvider()
        return None

    @property
    def is_enabled(self) -> bool:
        return self._provider is not None

    def get_quotes(self, symbols: Iterable[str]) -> Dict[str, float]:
        if not self._provider:
            return {}
        return self._provider.quotes(symbols)


_price_service: Optional[PriceService] = None


def get_price_service() -> PriceService:
    global _price_service
    if _price_service is None:
        _price_service = PriceService()
    return _price_service


def reset_price_service_for_tests() -> None:  # pragma: no cover - used in tests
    global _price_service
    _price_service = None
