from __future__ import annotations

import zlib

from classweek.schemas.grid import CourseColor

COURSE_PALETTE: tuple[CourseColor, ...] = (
    CourseColor(name="teal", background="#0d9488", border="#2dd4bf"),
    CourseColor(name="yellow", background="#ca8a04", border="#facc15"),
    CourseColor(name="indigo", background="#3730a3", border="#6366f1"),
    CourseColor(name="rose", background="#f43f5e", border="#fda4af"),
    CourseColor(name="purple", background="#9333ea", border="#c084fc"),
    CourseColor(name="orange", background="#f97316", border="#fdba74"),
    CourseColor(name="slate", background="#475569", border="#94a3b8"),
    CourseColor(name="sky", background="#0ea5e9", border="#7dd3fc"),
)


def palette_index(course_id: str | int, palette_size: int = len(COURSE_PALETTE)) -> int:
    """Stable palette slot for a course.

    Numeric ids keep the ``id mod size`` mapping; anything else goes through
    CRC32, which unlike ``hash()`` does not change between interpreter runs.
    """
    key = str(course_id).strip()
    if key.isdigit():
        return int(key) % palette_size
    return zlib.crc32(key.encode("utf-8")) % palette_size


def color_for_course(course_id: str | int) -> CourseColor:
    return COURSE_PALETTE[palette_index(course_id)]
