"""BaseService — foundation for farm services.

Every service receives a :class:`Farm` at construction time. The Farm
provides per-color transactional access to the database. Services own
their transaction boundaries via ``self._farm.transaction(...)``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from farmctl.infrastructure.farm import Farm


class BaseService:
    """Base for service-layer classes.

    Usage::

        class FarmService(BaseService):
            def add_animal(self, name: str, color: Color) -> ServiceResult:
                with self._farm.transaction(color) as repo:
                    ...
    """

    def __init__(self, farm: Farm) -> None:
        self._farm = farm
