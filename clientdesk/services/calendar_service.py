"""
Calendar Service - Handles public holidays and working day logic.

Architecture Decision: Strategy Pattern
The country and subdivision come from preferences, so report averages
follow the user's own working calendar.
"""

import datetime
from typing import List, Optional, Tuple

import holidays

from clientdesk.i18n import get_language


class CalendarService:
    """
    Handles holiday logic for per-working-day report figures.
    """

    def __init__(self, country: str = 'DE', subdivision: Optional[str] = None,
                 respect_holidays: bool = True, respect_weekends: bool = True):
        """
        Initialize with a country and optional subdivision code.

        Args:
            country: ISO country code (e.g., 'DE')
            subdivision: State/province code (e.g., 'BY' for Bavaria)
            respect_holidays: Whether to consider holidays as non-working days
            respect_weekends: Whether to consider weekends as non-working days
        """
        self.country = country
        self.subdivision = subdivision
        self.respect_holidays = respect_holidays
        self.respect_weekends = respect_weekends

        # Holiday names follow the app language where the country supports it
        self.holidays = holidays.country_holidays(
            country, subdiv=subdivision, language=get_language()
        )

    @classmethod
    def from_preferences(cls, prefs) -> 'CalendarService':
        return cls(
            country=prefs.holiday_country,
            subdivision=prefs.holiday_subdivision,
            respect_holidays=prefs.respect_holidays,
            respect_weekends=prefs.respect_weekends,
        )

    def is_working_day(self, date_obj: datetime.date) -> bool:
        """
        Check if a given date is a working day.

        Args:
            date_obj: The date to check

        Returns:
            True if it's a working day, False otherwise
        """
        if self.respect_weekends and self.is_weekend(date_obj):
            return False

        if self.respect_holidays and self.is_holiday(date_obj):
            return False

        return True

    def get_holiday_name(self, date_obj: datetime.date) -> str:
        """Holiday name or empty string if not a holiday"""
        return self.holidays.get(date_obj, "")

    def is_weekend(self, date_obj: datetime.date) -> bool:
        """Check if date is a weekend (Saturday=5, Sunday=6)"""
        return date_obj.weekday() > 4

    def is_holiday(self, date_obj: datetime.date) -> bool:
        """Check if date is a public holiday"""
        return date_obj in self.holidays

    def get_working_days_in_range(self, start_date: datetime.date,
                                  end_date: datetime.date) -> int:
        """
        Count working days in a date range.

        Args:
            start_date: Start of range (inclusive)
            end_date: End of range (inclusive)

        Returns:
            Number of working days
        """
        working_days = 0
        current = start_date

        while current <= end_date:
            if self.is_working_day(current):
                working_days += 1
            current += datetime.timedelta(days=1)

        return working_days

    def holidays_in_range(self, start_date: datetime.date,
                          end_date: datetime.date) -> List[Tuple[datetime.date, str]]:
        """(date, name) for each public holiday in the range, both ends inclusive"""
        found = []
        current = start_date
        while current <= end_date:
            if self.is_holiday(current):
                found.append((current, self.get_holiday_name(current)))
            current += datetime.timedelta(days=1)
        return found
