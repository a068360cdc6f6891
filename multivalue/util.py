import logging
import operator
from collections.abc import Mapping
from typing import Any, Callable, Hashable, Iterable

logger = logging.getLogger(__name__)

_NOT_REQUESTED = object()


def _rebuild(cls, unique, items):
    rebuilt = cls() if unique is None else cls(unique=unique)
    for key, values in items:
        dict.__setitem__(rebuilt, key, values)
    return rebuilt


class multidict(dict):
    """
    A dict that stores every value assigned to a key instead of overwriting it.

    ``d[key] = value`` appends ``value`` to the list kept under ``key``, so reading
    ``d[key]`` gives back all of them in the order they were assigned.

    ``unique`` turns on deduplication per key:
    * a callable ``unique(existing, new)`` returning True when ``new`` is a duplicate
    * ``None`` or ``True`` to compare values with ``==``

    Anything else that isn't callable (``False`` and ``0`` included) falls back to ``==``
    with a warning. Leave it out to keep every value.
    """

    def __init__(self, other=(), /, *, unique: Any = _NOT_REQUESTED, **kwargs):
        super().__init__()
        if unique is _NOT_REQUESTED:
            self._unique = None
        elif unique is None or unique is True:
            self._unique = operator.eq
        elif callable(unique):
            self._unique = unique
        else:
            logger.warning(f"unique={unique!r} is not callable, comparing values with == instead")
            self._unique = operator.eq
        self.update(other, **kwargs)

    @property
    def unique(self) -> Callable[[Any, Any], bool] | None:
        return self._unique

    def __setitem__(self, key, value):
        self.add(key, value)

    def add(self, key: Hashable, *values: Any) -> None:
        if not values:
            return
        if (stored := self.get(key)) is None:
            # the first value can't match anything, so the key never ends up empty
            stored = []
            super().__setitem__(key, stored)

        if self._unique is None:
            stored.extend(values)
            return

        for value in values:
            if any(self._unique(existing, value) for existing in stored):
                logger.debug(f"Skipping duplicate {value!r} for key {key!r}")
                continue
            stored.append(value)

    def update(self, other: Iterable = (), /, **kwargs):
        if isinstance(other, multidict):
            for key, values in other.items():
                self.add(key, *values)
        else:
            if hasattr(other, "keys"):
                pairs = [(key, other[key]) for key in other.keys()]
            else:
                pairs = other
            for key, value in pairs:
                self[key] = value
        for key, value in kwargs.items():
            self[key] = value

    def __ior__(self, other):
        self.update(other)
        return self

    def __or__(self, other):
        if not isinstance(other, Mapping):
            return NotImplemented
        merged = self.copy()
        merged.update(other)
        return merged

    def __ror__(self, other):
        if not isinstance(other, Mapping):
            return NotImplemented
        merged = _rebuild(self.__class__, self._unique, ())
        merged.update(other)
        merged.update(self)
        return merged

    def setdefault(self, key, default=None):
        """
        Appends ``default`` if ``key`` has no values yet, then returns the key's list.

        Without a default this stores ``[None]``, unlike ``get`` which returns a bare ``None``.
        """
        if key not in self:
            self[key] = default
        return self[key]

    def get_one(self, key, rank: int = 0):
        try:
            return self[key][rank]
        except IndexError as ie:
            raise IndexError(f"Index {rank} out of range for key {key}") from ie

    def discard(self, key) -> bool:
        """Removes ``key`` and all of its values, returning whether it was there."""
        if key not in self:
            return False
        super().__delitem__(key)
        return True

    def copy(self) -> "multidict":
        return _rebuild(self.__class__, self._unique, ((key, list(values)) for key, values in self.items()))

    __copy__ = copy

    def __reduce__(self):
        # dict's default pickling replays items through __setitem__, which would nest the lists
        return _rebuild, (self.__class__, self._unique, list(self.items()))

    def __repr__(self):
        return f"{self.__class__.__name__}({super().__repr__()})"
