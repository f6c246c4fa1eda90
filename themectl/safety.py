"""Safety checks guarding the live theme.

Every operation that writes to a theme or binds a dev session to it must
pass ``verify_target`` first. The check deliberately ignores how the
candidate was chosen: the selection menu already hides the live theme, but
that filtering is not trusted here.
"""

from .exceptions import SafetyViolationError
from .models.theme import Theme, ThemeRole


def is_eligible(candidate: Theme, live: Theme) -> bool:
    """Return True if ``candidate`` may be used for development."""
    if candidate.id == live.id:
        return False
    if candidate.role == ThemeRole.LIVE.value:
        return False
    return True


def verify_target(candidate: Theme, live: Theme) -> Theme:
    """Verify that ``candidate`` is not the live theme.

    Args:
        candidate: Theme picked by the user
        live: The store's live theme

    Returns:
        The candidate, unchanged

    Raises:
        SafetyViolationError: If the candidate is, or claims to be, live
    """
    if candidate.id == live.id:
        raise SafetyViolationError(
            "Selected theme IS the live theme!",
            theme_id=candidate.id,
            live_id=live.id,
            hint="This should never happen. Aborting for safety.",
        )

    if candidate.role == ThemeRole.LIVE.value:
        raise SafetyViolationError(
            'Selected theme has role "live"!',
            theme_id=candidate.id,
            live_id=live.id,
            hint="This should never happen. Aborting for safety.",
        )

    return candidate
