"""Birthday-style celebration cards for the top of the parent dashboard."""

from __future__ import annotations

from typing import Any

from ..conditions import postpartum, scope
from ..models import Scope, Screen, Slot
from ..rules import Program

CELEBRATION_PRIORITY = 100

_ACTIONS = (
    {"label": "Save Memory", "type": "save_memory"},
    {"label": "Take Photo", "type": "take_photo"},
    {"label": "Share", "type": "share"},
)

# (postpartum day, celebration type, short label, card age label, title)
_MONTHLY = [
    (30, "month_1", "1 month", "1 Month Old!", "🎂 Happy 1 Month Birthday!"),
    (60, "month_2", "2 months", "2 Months Old!", "🎂 Happy 2 Month Birthday!"),
    (90, "month_3", "3 months", "3 Months Old!", "🎂 Happy 3 Month Birthday!"),
    (120, "month_4", "4 months", "4 Months Old!", "🎂 Happy 4 Month Birthday!"),
    (150, "month_5", "5 months", "5 Months Old!", "🎂 Happy 5 Month Birthday!"),
    (180, "month_6", "6 months", "6 Months Old!", "🎂 Happy 6 Month Birthday!"),
    (270, "month_9", "9 months", "9 Months Old!", "🎂 Happy 9 Month Birthday!"),
    (365, "year_1", "1 year", "1 Year Old!", "🎂🎉 Happy 1st Birthday!"),
    (547, "month_18", "18 months", "18 Months Old!", "🎂 Happy 18 Month Birthday!"),
    (730, "year_2", "2 years", "2 Years Old!", "🎂🎉 Happy 2nd Birthday!"),
]


def _celebration_props(
    day: int, celebration_type: str, short_label: str, age_label: str, title: str
) -> dict[str, Any]:
    return {
        "actions": [dict(a) for a in _ACTIONS],
        "ageLabel": age_label,
        "celebrationType": celebration_type,
        "showPhotoUpload": True,
        "statistics": {"ageInDays": day, "ageLabel": short_label},
        "title": title,
        "type": "celebration",
    }


def create_celebrations_program(ai: Any = None) -> Program:
    P = Program()

    def celebration(day: int, *details: str):
        return (
            P.rule()
            .slot(Screen.PARENT_DASHBOARD, Slot.HEADER)
            .when(scope(Scope.POSTPARTUM), postpartum.day.eq(day))
            .show("Card.Celebration", _celebration_props(day, *details))
            .priority(CELEBRATION_PRIORITY)
            .build()
        )

    # Weeks 1-12, one card on every seventh day
    for w in range(1, 13):
        plural = "Week" if w == 1 else "Weeks"
        P.add(
            celebration(
                w * 7,
                f"week_{w}",
                f"{w} {plural.lower()}",
                f"{w} {plural} Old!",
                f"🎉 Happy {w} Week Birthday!",
            )
        )

    for day, *details in _MONTHLY:
        P.add(celebration(day, *details))

    return P
