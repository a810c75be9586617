"""
Inventory Aggregate

Snapshot of one property as the admission engine sees it: the
availability window, the listing status and the date ranges held by
every active (non-cancelled) booking.

Repositories load it with ``lock=True`` inside a unit of work, which
locks the property row. Admission checks against the snapshot and the
write that follows both happen under that lock, so two overlapping
requests for the same property are serialized.
"""

from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from shared.domain.value_objects import DateRange


@dataclass(frozen=True)
class Allocation:
    """Date range held by one booking"""
    booking_id: UUID
    dates: DateRange


@dataclass
class Inventory:
    """
    Inventory for one property

    Key invariants:
    - allocations never overlap each other
    - allocations are sorted by date range
    """

    property_id: UUID
    window: DateRange
    property_status: str = 'active'
    allocations: List[Allocation] = field(default_factory=list)

    def __post_init__(self):
        self.allocations = sorted(self.allocations, key=lambda a: (a.dates, str(a.booking_id)))

    @property
    def is_bookable(self) -> bool:
        return self.property_status == 'active'

    def conflicts_for(self, dates: DateRange, exclude_booking_id: UUID | None = None) -> List[Allocation]:
        """Every allocation overlapping ``dates``, in ascending date order"""
        return [
            allocation for allocation in self.allocations
            if allocation.booking_id != exclude_booking_id and allocation.dates.overlaps_with(dates)
        ]

    def can_allocate(self, dates: DateRange, exclude_booking_id: UUID | None = None) -> bool:
        return not self.conflicts_for(dates, exclude_booking_id)

    def allocate(self, booking_id: UUID, dates: DateRange) -> Allocation:
        """
        Record ``dates`` as held by ``booking_id``

        Any earlier allocation of the same booking is replaced.

        Raises:
            ValueError: if the dates are taken by another booking; admission
            must have rejected such a request already
        """
        if not self.can_allocate(dates, exclude_booking_id=booking_id):
            raise ValueError(f"Dates {dates} are not available for property {self.property_id}")

        self.deallocate(booking_id)
        allocation = Allocation(booking_id=booking_id, dates=dates)
        self.allocations.append(allocation)
        self.allocations.sort(key=lambda a: (a.dates, str(a.booking_id)))
        return allocation

    def deallocate(self, booking_id: UUID) -> bool:
        before = len(self.allocations)
        self.allocations = [a for a in self.allocations if a.booking_id != booking_id]
        return len(self.allocations) != before

    def booked_ranges(self) -> List[DateRange]:
        return [allocation.dates for allocation in self.allocations]

    def __str__(self):
        return f"Inventory(property={self.property_id}, allocations={len(self.allocations)})"
