from datetime import date, timedelta

# English and Turkish keywords
TODAY_KEYWORDS = {"today", "bugün"}
TOMORROW_KEYWORDS = {"tomorrow", "yarın"}
YESTERDAY_KEYWORDS = {"yesterday", "dün"}


def normalize_date(value: str | None, include_yesterday: bool = True, today: date | None = None) -> str:
    """Map relative keywords to a YYYY-MM-DD date in local time.

    Anything that is not a known keyword is returned unchanged and is not validated.
    """
    today = today or date.today()
    if not value or value in TODAY_KEYWORDS:
        return today.isoformat()
    if value in TOMORROW_KEYWORDS:
        return (today + timedelta(days=1)).isoformat()
    if include_yesterday and value in YESTERDAY_KEYWORDS:
        return (today - timedelta(days=1)).isoformat()
    return value
