"""
core.domain.transactions — Helpers for safe aggregate writes.

Provides utilities that wrap ``transaction.atomic`` and conditional
``UPDATE`` statements into reusable patterns so that every ORM-backed
store follows the same concurrency and error-translation approach.

Design goals
------------
* Every store method turns ``django.db.DatabaseError`` into the domain's
  ``StorageError`` so callers only ever see the domain taxonomy.
* Aggregate saves use an optimistic ``version`` column: the row is only
  updated when nobody else bumped the version since it was loaded.
* Keep the helpers **generic** — they accept any Django model class.

Usage::

    from core.domain.transactions import compare_and_swap, storage_errors

    with storage_errors("saving complaint"):
        new_version = compare_and_swap(
            ComplaintModel, pk=42, expected_version=3, status="Resolved",
        )
"""

from __future__ import annotations

import contextlib
import functools
import logging
from typing import Any, Callable, Iterator, TypeVar

from django.db import DatabaseError, models, transaction
from django.db.models import F

from core.domain.exceptions import ConcurrentUpdateError, NotFoundError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=models.Model)


@contextlib.contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """
    Translate database failures raised inside the block into ``StorageError``.

    Domain exceptions raised inside the block pass through untouched.
    """
    try:
        yield
    except DatabaseError as exc:
        logger.exception("Storage failure while %s", operation)
        raise StorageError(f"Storage failure while {operation}.") from exc


def guarded(operation: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of ``storage_errors`` for store methods."""

    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            with storage_errors(operation):
                return fn(*args, **kwargs)

        return wrapper

    return decorator


def run_in_atomic(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Execute ``fn(*args, **kwargs)`` inside ``transaction.atomic()``.

    Convenient when a store method should be fully atomic but you
    don't want to decorate the function itself.

    Raises:
        Any exception raised by ``fn`` — the transaction is rolled back.
    """
    with transaction.atomic():
        return fn(*args, **kwargs)


def compare_and_swap(
    model_class: type[M],
    *,
    pk: Any,
    expected_version: int,
    version_field: str = "version",
    **changes: Any,
) -> int:
    """
    Apply ``changes`` to one row only if its version still matches.

    Issues ``UPDATE ... SET <changes>, version = version + 1
    WHERE pk = <pk> AND version = <expected_version>``.

    Returns:
        The new version number.

    Raises:
        NotFoundError:         The row no longer exists.
        ConcurrentUpdateError: The row exists but another writer bumped
                               its version first.
    """
    changes[version_field] = F(version_field) + 1
    updated = (
        model_class.objects
        .filter(pk=pk, **{version_field: expected_version})
        .update(**changes)
    )
    if updated:
        return expected_version + 1

    if not model_class.objects.filter(pk=pk).exists():
        raise NotFoundError(f"{model_class.__name__} with pk={pk} no longer exists.")
    raise ConcurrentUpdateError(
        entity=model_class.__name__,
        pk=pk,
        expected_version=expected_version,
    )
