"""
Period helpers: which sheet of the spreadsheet holds the current month.

Sheets are titled "<month name> <2-digit year>", e.g. "Март 24". The
title derivation is a pure function of the timestamp passed in; only
current_time() reads the clock.
"""
from __future__ import annotations

import enum
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from scoreboard.schemas.sheets import Sheet

logger = logging.getLogger(__name__)

SUPPORTED_LOCALES = ("ru", "en")


class Month(enum.IntEnum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    @property
    def en(self) -> str:
        return self.name.capitalize()

    @property
    def ru(self) -> str:
        return _RU_NAMES[self]

    def localized(self, locale: str) -> str:
        if locale == "ru":
            return self.ru
        if locale == "en":
            return self.en
        raise ValueError(f"Unsupported locale: {locale!r}")

    def prev(self) -> "Month":
        return Month(12 if self == 1 else self - 1)

    def next(self) -> "Month":
        return Month(1 if self == 12 else self + 1)


_RU_NAMES = {
    Month.JANUARY: "Январь",
    Month.FEBRUARY: "Февраль",
    Month.MARCH: "Март",
    Month.APRIL: "Апрель",
    Month.MAY: "Май",
    Month.JUNE: "Июнь",
    Month.JULY: "Июль",
    Month.AUGUST: "Август",
    Month.SEPTEMBER: "Сентябрь",
    Month.OCTOBER: "Октябрь",
    Month.NOVEMBER: "Ноябрь",
    Month.DECEMBER: "Декабрь",
}


def current_time() -> datetime:
    return datetime.now(tz=timezone.utc)


def local_date(now: datetime, utc_offset_hours: int = 0) -> date:
    """Calendar day of the sheet's rows at `now`, for a fixed offset from UTC."""
    return (now.astimezone(timezone.utc) + timedelta(hours=utc_offset_hours)).date()


def derive_title_name(now: datetime, locale: str = "ru") -> str:
    month = Month(now.month)
    year = f"{now.year % 100:02d}"
    title = f"{month.localized(locale)} {year}"
    logger.debug(
        "Derived sheet title %r from %s (%s)", title, now.strftime("%d.%m.%Y"), month.en
    )
    return title


def find_sheet_id(sheets: Iterable[Sheet], title: str) -> Optional[int]:
    """Return the id of the first sheet whose title equals `title`."""
    for sheet in sheets:
        props = sheet.properties
        if props is None or props.title is None:
            continue
        if props.title == title:
            if props.sheet_id is None:
                logger.warning("Sheet titled %r has no sheet_id, skipping", title)
                continue
            logger.debug("Found sheet_id=%s for title=%r", props.sheet_id, title)
            return props.sheet_id
    logger.debug("Sheet id was not found for title=%r", title)
    return None
