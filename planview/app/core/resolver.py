"""
Resolution of a selection path into displayable data.

Every function in this module is pure and total: missing disciplines,
regions, revisions, transforms or polygons fall back to the next, coarser
level of the hierarchy or to an identity value, never to an error.

Fallback order is most-specific-wins:
revision > region (polygon only) > discipline > drawing (image only).
"""

from typing import List, Optional, Sequence

import pandas as pd

from .metadata import (
    IDENTITY_TRANSFORM,
    Discipline,
    Drawing,
    ImageTransform,
    Polygon,
    Region,
    Revision,
)


# Keywords pandas resolves against the wall clock
_RELATIVE_DATE_WORDS = {"now", "today"}


def parse_date(value: str) -> int:
    """
    Parse a revision date into a millisecond timestamp.

    Parameters
    ----------
    value : str
        The date string as authored in the metadata.

    Returns
    -------
    int
        Milliseconds since the epoch (UTC). Unparsable values map to 0.
    """
    if str(value).strip().lower() in _RELATIVE_DATE_WORDS:
        return 0
    try:
        timestamp = pd.to_datetime(value, errors="coerce", utc=True)
    except (TypeError, ValueError, OverflowError):
        return 0
    if pd.isna(timestamp):
        return 0
    return int(timestamp.value // 1_000_000)


def latest_revision(revisions: Sequence[Revision]) -> Optional[Revision]:
    """
    Return the revision with the most recent date.

    Ties keep the authored order, so the earliest declared revision wins.
    """
    if not revisions:
        return None
    # sorted() is stable: equal timestamps keep declaration order
    return sorted(revisions, key=lambda r: -parse_date(r.date))[0]


def effective_discipline(
    drawing: Optional[Drawing], name: Optional[str]
) -> Optional[Discipline]:
    if drawing is None or not name:
        return None
    return drawing.disciplines.get(name)


def effective_region(
    discipline: Optional[Discipline], name: Optional[str]
) -> Optional[Region]:
    if discipline is None or not name:
        return None
    return discipline.regions.get(name)


def revision_collection(
    discipline: Optional[Discipline], region: Optional[Region]
) -> Sequence[Revision]:
    """Return the authoritative revision list, in authored order."""
    if region is not None:
        return region.revisions
    if discipline is not None:
        return discipline.revisions
    return ()


def revision_by_version(
    revisions: Sequence[Revision], version: Optional[str]
) -> Optional[Revision]:
    for revision in revisions:
        if revision.version == version:
            return revision
    return None


def effective_revision(
    revisions: Sequence[Revision], version: Optional[str]
) -> Optional[Revision]:
    """Return the revision matching ``version``, else the latest one."""
    return revision_by_version(revisions, version) or latest_revision(revisions)


def effective_image(
    drawing: Drawing,
    discipline: Optional[Discipline] = None,
    revision: Optional[Revision] = None,
) -> str:
    if revision is not None and revision.image:
        return revision.image
    if discipline is not None and discipline.image:
        return discipline.image
    return drawing.image


def effective_transform(
    discipline: Optional[Discipline] = None, revision: Optional[Revision] = None
) -> ImageTransform:
    if revision is not None and revision.image_transform is not None:
        return revision.image_transform
    if discipline is not None and discipline.image_transform is not None:
        return discipline.image_transform
    return IDENTITY_TRANSFORM


def effective_polygon(
    discipline: Optional[Discipline] = None,
    region: Optional[Region] = None,
    revision: Optional[Revision] = None,
) -> Optional[Polygon]:
    if revision is not None and revision.polygon is not None:
        return revision.polygon
    if region is not None and region.polygon is not None:
        return region.polygon
    if discipline is not None:
        return discipline.polygon
    return None


def discipline_names(drawing: Optional[Drawing]) -> List[str]:
    return list(drawing.disciplines) if drawing is not None else []


def region_names(discipline: Optional[Discipline]) -> List[str]:
    return list(discipline.regions) if discipline is not None else []


def overlay_candidates(drawing: Optional[Drawing], primary: Optional[str]) -> List[str]:
    """Return the disciplines that can be overlaid on ``primary``."""
    return [name for name in discipline_names(drawing) if name != primary]
