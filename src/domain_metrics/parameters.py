"""
Display parameters and field selection.

Each ParameterKind maps to the record fields it reads and the function that
turns them into a display string. The selection only filters what gets
rendered; the engine always fetches every provider.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .enums import ParameterKind
from .formatters import (
    NOT_AVAILABLE,
    format_currency,
    format_date,
    format_domain_age,
    format_number_with_commas,
    format_yes_no,
)
from .models import DomainMetricsRecord


def _plain(value) -> str:
    if value is None:
        return NOT_AVAILABLE
    return str(value)


def _pair(first, second) -> str:
    if first is None and second is None:
        return NOT_AVAILABLE
    return f"{_plain(first)} / {_plain(second)}"


def _estimated_value(record: DomainMetricsRecord) -> str:
    formatted = format_currency(record.estimated_value)
    if formatted == NOT_AVAILABLE:
        return formatted
    return f"${formatted}"


@dataclass(frozen=True)
class ParameterSpec:
    """How one display parameter reads and formats a record."""

    kind: ParameterKind
    fields: tuple[str, ...]
    render: Callable[[DomainMetricsRecord], str]

    @property
    def label(self) -> str:
        return self.kind.label


PARAMETERS: dict[ParameterKind, ParameterSpec] = {
    ParameterKind.DA_PA: ParameterSpec(
        ParameterKind.DA_PA,
        ("moz_da", "moz_pa"),
        lambda r: _pair(r.moz_da, r.moz_pa),
    ),
    ParameterKind.TF_CF: ParameterSpec(
        ParameterKind.TF_CF,
        ("majestic_tf", "majestic_cf"),
        lambda r: _pair(r.majestic_tf, r.majestic_cf),
    ),
    ParameterKind.REFERRING_DOMAINS: ParameterSpec(
        ParameterKind.REFERRING_DOMAINS,
        ("majestic_ref_domains",),
        lambda r: format_number_with_commas(r.majestic_ref_domains),
    ),
    ParameterKind.TOTAL_BACKLINKS: ParameterSpec(
        ParameterKind.TOTAL_BACKLINKS,
        ("majestic_links",),
        lambda r: format_number_with_commas(r.majestic_links),
    ),
    ParameterKind.ESTIMATED_VALUE: ParameterSpec(
        ParameterKind.ESTIMATED_VALUE,
        ("estimated_value",),
        _estimated_value,
    ),
    ParameterKind.GOOGLE_INDEXED: ParameterSpec(
        ParameterKind.GOOGLE_INDEXED,
        ("is_indexed",),
        lambda r: format_yes_no(r.is_indexed),
    ),
    ParameterKind.DOMAIN_DROPS: ParameterSpec(
        ParameterKind.DOMAIN_DROPS,
        ("drops",),
        lambda r: _plain(r.drops),
    ),
    ParameterKind.EXPIRATION_DATE: ParameterSpec(
        ParameterKind.EXPIRATION_DATE,
        ("expiration_date",),
        lambda r: format_date(r.expiration_date),
    ),
    ParameterKind.DOMAIN_AGE: ParameterSpec(
        ParameterKind.DOMAIN_AGE,
        ("domain_age_days",),
        lambda r: format_domain_age(r.domain_age_days),
    ),
    ParameterKind.REDIRECTED_DOMAINS: ParameterSpec(
        ParameterKind.REDIRECTED_DOMAINS,
        ("redirect_domains",),
        lambda r: str(r.redirect_count),
    ),
}

# Display order
ALL_PARAMETERS: tuple[ParameterKind, ...] = tuple(ParameterKind)


def parameter_from_label(label: str) -> ParameterKind:
    """
    Look up a parameter by its label (case-insensitive).

    Raises:
        ValueError: If no parameter has that label
    """
    wanted = label.strip().lower()
    for kind in ParameterKind:
        if kind.label.lower() == wanted or kind.name.lower() == wanted:
            return kind
    raise ValueError(f"Unknown parameter: {label!r}")


def render_parameter(kind: ParameterKind, record: DomainMetricsRecord) -> str:
    return PARAMETERS[kind].render(record)


class FieldSelection:
    """Mutable set of parameters a consumer wants displayed."""

    def __init__(self, kinds: Optional[Iterable[ParameterKind]] = None) -> None:
        self._kinds: set[ParameterKind] = set(kinds or ())

    @classmethod
    def all(cls) -> "FieldSelection":
        return cls(ALL_PARAMETERS)

    @classmethod
    def from_labels(cls, labels: Iterable[str]) -> "FieldSelection":
        return cls(parameter_from_label(label) for label in labels)

    def __contains__(self, kind: ParameterKind) -> bool:
        return kind in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)

    def toggle(self, kind: ParameterKind) -> bool:
        """Flip ``kind`` in or out of the selection; returns the new membership."""
        if kind in self._kinds:
            self._kinds.discard(kind)
            return False
        self._kinds.add(kind)
        return True

    def select(self, kind: ParameterKind) -> None:
        self._kinds.add(kind)

    def deselect(self, kind: ParameterKind) -> None:
        self._kinds.discard(kind)

    def ordered(self) -> list[ParameterKind]:
        """Selected parameters in display order."""
        return [kind for kind in ALL_PARAMETERS if kind in self._kinds]

    def render(self, record: DomainMetricsRecord) -> list[tuple[str, str]]:
        """
        Produce ``(label, value)`` rows for the selected parameters.

        Redirected domains expand into a total row followed by one row per
        redirecting domain.
        """
        rows: list[tuple[str, str]] = []
        for kind in self.ordered():
            if kind == ParameterKind.REDIRECTED_DOMAINS:
                rows.append(("Total Redirected Domains", str(record.redirect_count)))
                rows.extend(("Redirected Domain", name) for name in record.redirect_domains)
            else:
                rows.append((kind.label, render_parameter(kind, record)))
        return rows

    def to_dict(self, record: DomainMetricsRecord) -> dict:
        """Selected parameters as a JSON-friendly mapping."""
        out: dict = {}
        for kind in self.ordered():
            if kind == ParameterKind.REDIRECTED_DOMAINS:
                out[kind.label] = list(record.redirect_domains)
            else:
                out[kind.label] = render_parameter(kind, record)
        return out
