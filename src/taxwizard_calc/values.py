"""
Value store accessor: read access to a sparse field -> value map.

The map belongs to the data-entry flow. FieldValues borrows it for the
duration of one calculation and never writes to it.
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Set

import structlog

from .constants import DEFAULT_TAX_CONSTANTS, FilingStatus, TaxConstants

logger = structlog.get_logger(__name__)

FieldValueMap = Mapping[str, Any]

_CENT = Decimal("0.01")


def round_cents(amount: float) -> float:
    """
    Round to the cent, ties away from zero.

    Goes through the float's shortest repr so that 70.64775 rounds to 70.65
    rather than whatever its binary expansion suggests.
    """
    try:
        amount = float(amount)
    except OverflowError:
        return 0.0
    if not math.isfinite(amount):
        return 0.0
    exact = Decimal(repr(amount))
    # Enough digits for every integer place plus the two cents
    context = Context(prec=max(28, exact.adjusted() + 3))
    rounded = exact.quantize(_CENT, rounding=ROUND_HALF_UP, context=context)
    return float(rounded) + 0.0  # normalize -0.0


def to_number(value: Any) -> Optional[float]:
    """
    Parse a stored value as a number.

    Returns None for absent, boolean, non-finite or unparseable values.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, (str, Decimal)):
        try:
            number = float(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError, OverflowError):
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


class FieldValues:
    """
    Read-only view of a value map bound to a constants table.

    Args:
        data: Field id -> value map (None is an empty map)
        constants: Constants table for the tax year
        field_calculations: Field id -> calculation name bindings used by
            resolve(); defaults to the catalog's bindings
    """

    def __init__(
        self,
        data: Optional[FieldValueMap] = None,
        constants: Optional[TaxConstants] = None,
        field_calculations: Optional[Mapping[str, str]] = None,
    ):
        self._data = data if isinstance(data, Mapping) else {}
        self.constants = constants or DEFAULT_TAX_CONSTANTS
        self.field_calculations = field_calculations
        self._resolving: Set[str] = set()

    @classmethod
    def wrap(
        cls,
        data: Any,
        constants: Optional[TaxConstants] = None,
    ) -> "FieldValues":
        """Wrap a plain map, or reuse an existing view when nothing changes."""
        if isinstance(data, FieldValues):
            if constants is None or constants is data.constants:
                return data
            return cls(data._data, constants, data.field_calculations)
        return cls(data, constants)

    def __contains__(self, field_id: str) -> bool:
        return field_id in self._data

    def raw(self, field_id: str) -> Any:
        return self._data.get(field_id)

    def override(self, field_id: str) -> Optional[float]:
        """The stored numeric value, or None when absent or not numeric."""
        return to_number(self._data.get(field_id))

    def number(self, field_id: str) -> float:
        """Stored numeric value, 0 when absent or not numeric."""
        value = self.override(field_id)
        return 0.0 if value is None else value

    def total(self, *field_ids: str) -> float:
        return sum(self.number(field_id) for field_id in field_ids)

    def text(self, field_id: str) -> Optional[str]:
        value = self._data.get(field_id)
        return value.strip() if isinstance(value, str) else None

    @property
    def filing_status(self) -> FilingStatus:
        return FilingStatus.parse(self._data.get("filing_status"))

    def resolve(self, field_id: str) -> float:
        """
        Stored value if numeric, else the bound calculation, else 0.

        A field that is already being resolved further up the stack
        resolves to 0.
        """
        stored = self.override(field_id)
        if stored is not None:
            return stored
        if field_id in self._resolving:
            logger.warning("calculation_cycle", field_id=field_id,
                           resolving=sorted(self._resolving))
            return 0.0

        from .registry import DEFAULT_FIELD_CALCULATIONS, get_calculation_fn

        bindings = self.field_calculations
        if bindings is None:
            bindings = DEFAULT_FIELD_CALCULATIONS
        fn = get_calculation_fn(bindings.get(field_id))
        if fn is None:
            return 0.0

        self._resolving.add(field_id)
        try:
            return round_cents(fn(self))
        finally:
            self._resolving.discard(field_id)
