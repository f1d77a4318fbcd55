"""Property-level context supplied alongside the three input files."""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import AddressRole


@dataclass(frozen=True, slots=True)
class PropertyAddress:
    label: str
    role: AddressRole = AddressRole.SECONDARY


@dataclass(frozen=True, slots=True, kw_only=True)
class PropertyContext:
    """Identifies the tenant and property being imported plus its fixed attachments."""

    tenant_id: str
    property_id: str
    addresses: tuple[PropertyAddress, ...] = field(default_factory=tuple)
    cadastral_refs: tuple[str, ...] = field(default_factory=tuple)

    @property
    def primary_address(self) -> PropertyAddress | None:
        """Return the address flagged ``main``; the last one wins when several are."""

        primary: PropertyAddress | None = None
        for address in self.addresses:
            if address.role is AddressRole.MAIN:
                primary = address
        return primary
