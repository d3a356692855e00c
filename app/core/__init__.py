from app.core.availability import day_availability, is_slot_available
from app.core.booking import cancel_appointment, create_appointment
from app.core.overlays import excluded_labels, shop_now
from app.core.schedule import get_admin_settings, hours_for_date
from app.core.timelabels import format_label, parse_label, range_labels

__all__ = [
    "cancel_appointment",
    "create_appointment",
    "day_availability",
    "excluded_labels",
    "format_label",
    "get_admin_settings",
    "hours_for_date",
    "is_slot_available",
    "parse_label",
    "range_labels",
    "shop_now",
]
