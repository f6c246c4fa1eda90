"""Theme ordering and live-theme lookup.

Pure functions over a fetched theme list. Nothing here talks to Shopify.
"""

from typing import Iterable, List, Sequence

from .exceptions import NoLiveThemeError
from .models.theme import Theme


def identify_live(themes: Iterable[Theme]) -> Theme:
    """Return the single live theme.

    Args:
        themes: Fetched themes

    Returns:
        The theme with role ``live``

    Raises:
        NoLiveThemeError: If zero or several themes report role ``live``
    """
    live = [theme for theme in themes if theme.is_live]

    if not live:
        raise NoLiveThemeError("Could not identify live theme!")

    if len(live) > 1:
        ids = ", ".join(str(theme.id) for theme in live)
        raise NoLiveThemeError(
            f"Expected exactly one live theme, found {len(live)} (IDs: {ids})",
            details={"live_ids": [theme.id for theme in live]},
        )

    return live[0]


def sort_for_display(themes: Iterable[Theme]) -> List[Theme]:
    """Sort themes: live first, then newest (highest ID) to oldest.

    ``sorted`` is stable, so themes sharing an ID keep their input order.
    """
    return sorted(themes, key=lambda theme: (not theme.is_live, -theme.id))


def development_themes(themes: Iterable[Theme]) -> List[Theme]:
    """Selection menu: every non-live theme, newest first."""
    return sort_for_display(theme for theme in themes if not theme.is_live)


class ThemeDirectory:
    """A fetched theme list with its display ordering."""

    def __init__(self, themes: Sequence[Theme]) -> None:
        self.themes = list(themes)

    def __len__(self) -> int:
        return len(self.themes)

    @property
    def live(self) -> Theme:
        return identify_live(self.themes)

    def sorted(self) -> List[Theme]:
        return sort_for_display(self.themes)

    def choices(self) -> List[Theme]:
        return development_themes(self.themes)
