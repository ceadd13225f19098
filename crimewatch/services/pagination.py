from typing import Sequence, TypeVar

from crimewatch.core.errors import ValidationError

T = TypeVar('T')


def page_offset(page: int, page_size: int) -> int:
    if page < 1:
        raise ValidationError('page must be >= 1')
    if page_size < 1:
        raise ValidationError('page_size must be >= 1')
    return (page - 1) * page_size


def slice_page(items: Sequence[T], page: int, page_size: int) -> list[T]:
    start = page_offset(page, page_size)
    return list(items[start : start + page_size])
