"""
Guard Tour Response Formatter - Chat-ready text from raw API payloads.

Every method is pure: it takes a raw payload (or None) and returns a
QueryResult. No network access, no side effects.

Rules shared by all formatters:
===============================
1. None / empty input → ``has_data=False`` with a fixed message for that
   kind of entity.
2. Fields are rendered in a fixed order. Optional fields appear only when
   present, using the first non-empty value among alternate names
   (``phone`` / ``phoneNumber``). Required display fields that are
   missing render as "N/A".
3. Patrol lists show at most PATROL_DISPLAY_LIMIT entries in the order
   the API returned them, with a "Showing N of M" footer when truncated.

Usage:
======
    formatter = ResponseFormatter()
    result = formatter.format_site_info(payload)
    print(result.message)
"""

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from askari.environments.guardtour.schemas import QueryResult


PATROL_DISPLAY_LIMIT = 5
PLACEHOLDER = "N/A"

# Fixed English month names so output does not depend on the process locale
MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first value among ``keys`` that is neither None nor empty."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _company_name(company: Any) -> Any:
    if isinstance(company, Mapping):
        return company.get("name") or PLACEHOLDER
    return company


class ResponseFormatter:
    """
    Renders guard-tour payloads as WhatsApp-friendly text.

    Attributes:
        patrol_limit: Maximum number of patrols listed in one message
    """

    def __init__(self, patrol_limit: int = PATROL_DISPLAY_LIMIT):
        self.patrol_limit = patrol_limit

    # -------------------------------------------------------------------------
    # PATROLS
    # -------------------------------------------------------------------------

    def format_patrol_reports(
        self,
        patrols: Optional[Sequence[Mapping[str, Any]]],
        site_name: str,
    ) -> QueryResult:
        if not patrols:
            return QueryResult(
                message=f"No patrol reports found for {site_name}.",
                has_data=False,
            )

        lines = [f"📋 *Patrol Reports - {site_name}*", ""]

        for index, patrol in enumerate(patrols[: self.patrol_limit], start=1):
            lines.append(f"*Patrol {index}:*")
            lines.append(f"👮 Guard: {self._patrol_guard(patrol)}")
            lines.append(f"⏰ Time: {self.format_datetime(self._patrol_time(patrol))}")
            lines.append(f"📍 Status: {patrol.get('status') or PLACEHOLDER}")

            location = first_present(patrol, "location", "checkpoint")
            if location:
                lines.append(f"🗺️ Location: {location}")

            notes = first_present(patrol, "notes", "description")
            if notes:
                lines.append(f"📝 Notes: {notes}")

            lines.extend(["", "---", ""])

        total = len(patrols)
        if total > self.patrol_limit:
            lines.append(f"📊 Showing {self.patrol_limit} of {total} patrol reports.")

        return QueryResult(
            message="\n".join(lines).strip(),
            has_data=True,
            data=list(patrols),
            count=total,
        )

    @staticmethod
    def _patrol_guard(patrol: Mapping[str, Any]) -> str:
        if patrol.get("guardName"):
            return str(patrol["guardName"])

        guard = patrol.get("guard")
        if isinstance(guard, Mapping):
            full = f"{guard.get('firstName') or ''} {guard.get('lastName') or ''}".strip()
            return full or guard.get("name") or PLACEHOLDER
        if guard:
            return str(guard)
        return PLACEHOLDER

    @staticmethod
    def _patrol_time(patrol: Mapping[str, Any]) -> Optional[str]:
        stamp = first_present(patrol, "timestamp", "createdAt")
        if stamp:
            return str(stamp)

        date = patrol.get("date")
        start = patrol.get("startTime")
        if date and start:
            return f"{date}T{start}" if "T" not in str(start) else str(start)
        return date or start

    # -------------------------------------------------------------------------
    # SITES
    # -------------------------------------------------------------------------

    def format_site_info(self, site: Optional[Mapping[str, Any]]) -> QueryResult:
        if not site:
            return QueryResult(message="Site information not found.", has_data=False)

        lines = ["🏢 *Site Information*", ""]
        lines.append(f"*Name:* {first_present(site, 'name', 'title') or PLACEHOLDER}")
        lines.append(f"*Location:* {first_present(site, 'address', 'location') or PLACEHOLDER}")
        lines.append(f"*Status:* {self._status_label(site)}")

        if site.get("description"):
            lines.append(f"*Description:* {site['description']}")

        contact = first_present(site, "contactPerson", "contact")
        if contact:
            lines.append(f"*Contact:* {contact}")

        phone = first_present(site, "phone", "phoneNumber")
        if phone:
            lines.append(f"*Phone:* {phone}")

        if site.get("company"):
            lines.append(f"*Company:* {_company_name(site['company'])}")

        return QueryResult(message="\n".join(lines), has_data=True, data=dict(site))

    def format_site_list(self, sites: Optional[Sequence[Mapping[str, Any]]]) -> QueryResult:
        if not sites:
            return QueryResult(message="No sites found in the system.", has_data=False)

        lines = ["🏢 *All Sites:*", ""]
        for index, site in enumerate(sites, start=1):
            entry = f"{index}. {site.get('name') or 'Unnamed Site'}"
            if site.get("status"):
                entry += f" ({site['status']})"
            lines.append(entry)

        return QueryResult(
            message="\n".join(lines),
            has_data=True,
            data=list(sites),
            count=len(sites),
        )

    @staticmethod
    def _status_label(data: Mapping[str, Any]) -> str:
        status = data.get("status")
        if isinstance(status, str) and status:
            return status

        active = status if isinstance(status, bool) else data.get("isActive")
        if active is None:
            return PLACEHOLDER
        return "✅ Active" if active else "❌ Inactive"

    # -------------------------------------------------------------------------
    # GUARDS
    # -------------------------------------------------------------------------

    def format_guard_info(self, guard: Optional[Mapping[str, Any]]) -> QueryResult:
        if not guard:
            return QueryResult(message="Guard information not found.", has_data=False)

        full_name = f"{guard.get('firstName') or ''} {guard.get('lastName') or ''}".strip()

        lines = ["👮 *Guard Information*", ""]
        lines.append(f"*Name:* {full_name or guard.get('name') or PLACEHOLDER}")
        lines.append(f"*ID:* {first_present(guard, 'id', 'guardId') or PLACEHOLDER}")
        lines.append(f"*Email:* {guard.get('email') or PLACEHOLDER}")
        lines.append(f"*Status:* {self._status_label({'isActive': guard.get('isActive')})}")

        phone = first_present(guard, "phone", "phoneNumber")
        if phone:
            lines.append(f"*Phone:* {phone}")

        current_site = guard.get("currentSite")
        if current_site:
            if isinstance(current_site, Mapping):
                current_site = current_site.get("name") or PLACEHOLDER
            lines.append(f"*Current Site:* {current_site}")

        if guard.get("company"):
            lines.append(f"*Company:* {_company_name(guard['company'])}")

        return QueryResult(message="\n".join(lines), has_data=True, data=dict(guard))

    def format_guard_list(
        self,
        guards: Optional[Sequence[Mapping[str, Any]]],
        site_name: str,
        scanned_limit: Optional[int] = None,
    ) -> QueryResult:
        """
        Numbered guard list for a site.

        ``scanned_limit`` is set when the guard page the list was filtered
        from came back full, so guards past that page were never checked.
        """
        footer = (
            f"\n\n_Only the first {scanned_limit} guards were checked; this list may be incomplete._"
            if scanned_limit else ""
        )

        if not guards:
            return QueryResult(message=f"No guards found for {site_name}.{footer}", has_data=False)

        lines = [f"👮 *Guards - {site_name}*", ""]
        for index, guard in enumerate(guards, start=1):
            name = f"{guard.get('firstName') or ''} {guard.get('lastName') or ''}".strip()
            entry = f"{index}. {name or guard.get('name') or PLACEHOLDER}"
            phone = first_present(guard, "phone", "phoneNumber")
            if phone:
                entry += f" ({phone})"
            lines.append(entry)

        return QueryResult(
            message="\n".join(lines) + footer,
            has_data=True,
            data=list(guards),
            count=len(guards),
        )

    # -------------------------------------------------------------------------
    # PERFORMANCE & STATS
    # -------------------------------------------------------------------------

    def format_performance_report(
        self,
        report: Optional[Mapping[str, Any]],
        site_name: str,
        timeframe: Optional[str],
    ) -> QueryResult:
        if not report:
            return QueryResult(
                message=f"No performance data found for {site_name}.",
                has_data=False,
            )

        period = "Today" if timeframe == "today" else "This Month"
        lines = [f"📊 *Performance Report - {site_name}*", f"⏰ Period: {period}", ""]

        fields = (
            ("totalPatrols", "🚶 Total Patrols"),
            ("completedPatrols", "✅ Completed"),
            ("missedPatrols", "❌ Missed"),
            ("averageResponse", "⏱️ Avg Response"),
        )
        for key, label in fields:
            if report.get(key) is not None:
                lines.append(f"{label}: {report[key]}")

        return QueryResult(message="\n".join(lines), has_data=True, data=dict(report))

    def format_system_stats(self, stats: Optional[Mapping[str, Any]]) -> QueryResult:
        if not stats:
            return QueryResult(message="System statistics not available.", has_data=False)

        lines = ["📈 *System Statistics*", ""]

        fields = (
            ("totalSites", "🏢 Total Sites"),
            ("totalGuards", "👮 Total Guards"),
            ("activePatrols", "🚶 Active Patrols"),
            ("todayPatrols", "📅 Today's Patrols"),
        )
        for key, label in fields:
            if stats.get(key) is not None:
                lines.append(f"{label}: {stats[key]}")

        return QueryResult(message="\n".join(lines), has_data=True, data=dict(stats))

    # -------------------------------------------------------------------------
    # DATE / TIME
    # -------------------------------------------------------------------------

    @staticmethod
    def format_datetime(value: Optional[str]) -> str:
        """
        Render an ISO-8601 timestamp as "Jan 31, 2025, 08:30 AM".

        The clock time is shown as written in the input (no timezone
        conversion). Input that cannot be parsed is returned verbatim.
        """
        if not value:
            return PLACEHOLDER

        text = str(value).strip()
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return text

        hour = parsed.hour % 12 or 12
        meridiem = "AM" if parsed.hour < 12 else "PM"
        return (
            f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}, "
            f"{hour:02d}:{parsed.minute:02d} {meridiem}"
        )

