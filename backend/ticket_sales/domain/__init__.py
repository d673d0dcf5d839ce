from ticket_sales.domain.availability import (
    Available,
    AvailabilityResult,
    Unavailable,
    UnavailableReason,
    evaluate,
    sale_end_instant,
)
from ticket_sales.domain.sale_window import (
    AbsoluteBound,
    RelativeOffset,
    SaleWindowBound,
    resolve_sale_end,
    resolve_sale_start,
)
from ticket_sales.domain.ticket import TicketConfig, TicketDraft, TicketKind, WindowMode

__all__ = [
    "Available",
    "AvailabilityResult",
    "Unavailable",
    "UnavailableReason",
    "evaluate",
    "sale_end_instant",
    "AbsoluteBound",
    "RelativeOffset",
    "SaleWindowBound",
    "resolve_sale_start",
    "resolve_sale_end",
    "TicketConfig",
    "TicketDraft",
    "TicketKind",
    "WindowMode",
]
