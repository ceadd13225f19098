"""Report status workflow.

pending -> reviewing -> {verified, rejected}, verified -> resolved.
``resolved`` and ``rejected`` are terminal. The module holds no state and
does not know who is asking; callers enforce the admin-only rule.
"""
from crimewatch.core.errors import InvalidTransitionError
from crimewatch.models.enums import ReportStatus

TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.REVIEWING}),
    ReportStatus.REVIEWING: frozenset({ReportStatus.VERIFIED, ReportStatus.REJECTED}),
    ReportStatus.VERIFIED: frozenset({ReportStatus.RESOLVED}),
    ReportStatus.RESOLVED: frozenset(),
    ReportStatus.REJECTED: frozenset(),
}

PUBLIC_ANONYMOUS_STATUSES = (ReportStatus.VERIFIED, ReportStatus.RESOLVED)


def allowed_transitions(current: ReportStatus) -> list[ReportStatus]:
    return sorted(TRANSITIONS[ReportStatus(current)], key=lambda item: item.value)


def is_terminal(status: ReportStatus) -> bool:
    return not TRANSITIONS[ReportStatus(status)]


def can_transition(current: ReportStatus, requested: ReportStatus) -> bool:
    return ReportStatus(requested) in TRANSITIONS[ReportStatus(current)]


def transition(current: ReportStatus, requested: ReportStatus) -> ReportStatus:
    current = ReportStatus(current)
    requested = ReportStatus(requested)
    if not can_transition(current, requested):
        allowed = ', '.join(item.value for item in allowed_transitions(current)) or 'none'
        raise InvalidTransitionError(
            f"Cannot move report from {current.value} to {requested.value} (allowed: {allowed})"
        )
    return requested
