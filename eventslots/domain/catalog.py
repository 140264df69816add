"""
Service catalog and engagement duration resolution.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence

from .exceptions import InvalidInput, UnknownService
from .models import ServiceKind

logger = logging.getLogger(__name__)


DEFAULT_SERVICES = (
    ServiceKind(name="DJ", default_hours=5, min_hours=4, max_hours=6),
    ServiceKind(name="Photography", default_hours=4, min_hours=3, max_hours=8),
    ServiceKind(name="Karaoke", default_hours=3, min_hours=2, max_hours=5),
)


class ServiceCatalog:
    """
    Read-only mapping of service identifiers to ``ServiceKind`` entries.

    Identifiers are matched exactly. In lenient mode (the default) unknown
    identifiers are logged and skipped; in strict mode they raise
    ``UnknownService``.
    """

    def __init__(self, services: Iterable[ServiceKind], strict: bool = False):
        entries = {}
        for service in services:
            if service.name in entries:
                raise InvalidInput(f"Duplicate service in catalog: {service.name}")
            entries[service.name] = service
        self._services: Mapping[str, ServiceKind] = MappingProxyType(entries)
        self.strict = strict

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def __iter__(self) -> Iterator[ServiceKind]:
        return iter(self._services.values())

    def __len__(self) -> int:
        return len(self._services)

    def get(self, name: str) -> Optional[ServiceKind]:
        return self._services.get(name)

    def lookup(self, name: str) -> ServiceKind:
        """Return the entry for ``name`` or raise ``UnknownService``."""
        service = self._services.get(name)
        if service is None:
            raise UnknownService([name])
        return service

    def known(self, services: Sequence[str]) -> List[ServiceKind]:
        """
        Resolve requested identifiers to catalog entries.

        Unknown identifiers raise in strict mode and are dropped with a
        warning otherwise, since they silently shorten the quoted duration.
        """
        unknown = [name for name in services if name not in self._services]

        if unknown:
            if self.strict:
                raise UnknownService(unknown)
            for name in unknown:
                logger.warning("Ignoring unknown service %r during duration resolution", name)

        return [self._services[name] for name in services if name in self._services]

    def resolve_duration(
        self,
        services: Sequence[str],
        override_minutes: Optional[int] = None,
    ) -> int:
        """
        Resolve the engagement length in minutes for a set of services.

        Services are assumed to run concurrently, so the result is the
        longest default duration among them, not the sum.

        Args:
            services: Requested service identifiers (must not be empty)
            override_minutes: Explicit duration, returned unchanged

        Returns:
            Duration in minutes (0 when no requested service is known)

        Raises:
            InvalidInput: If no services were requested
            UnknownService: In strict mode, for unknown identifiers
        """
        if not services:
            raise InvalidInput("No services specified")

        if override_minutes is not None:
            return override_minutes

        return max(
            (service.default_minutes for service in self.known(services)),
            default=0,
        )

    def out_of_bounds(self, services: Sequence[str], minutes: int) -> List[ServiceKind]:
        """Return requested services whose min/max hours do not allow ``minutes``."""
        return [
            service
            for service in (self._services.get(name) for name in services)
            if service is not None and not service.allows(minutes)
        ]


DEFAULT_CATALOG = ServiceCatalog(DEFAULT_SERVICES)


def resolve_duration(
    services: Sequence[str],
    override_minutes: Optional[int] = None,
    catalog: Optional[ServiceCatalog] = None,
) -> int:
    """Resolve the engagement length against ``catalog`` (default catalog if omitted)."""
    catalog = DEFAULT_CATALOG if catalog is None else catalog
    return catalog.resolve_duration(services, override_minutes)
