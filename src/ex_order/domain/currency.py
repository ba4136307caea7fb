"""Currency allow-list check applied when an order is created."""
from collections.abc import Iterable


class CurrencyValidator:
    def __init__(self, supported_codes: Iterable[str]) -> None:
        self._supported = frozenset(code.upper() for code in supported_codes)

    @property
    def supported_codes(self) -> frozenset[str]:
        return self._supported

    def is_supported(self, code: str | None) -> bool:
        """Case-insensitive membership test; None and blanks are unsupported."""
        if not code:
            return False
        return code.strip().upper() in self._supported
