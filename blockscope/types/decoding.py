from dataclasses import dataclass, field
from typing import Any

from .abi import AbiDescriptor


@dataclass(frozen=True, slots=True)
class DecodedParameter:
    """Single decoded parameter.  value is always a display string, never raw bytes"""

    name: str
    type: str
    value: str
    indexed: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Returns JSON serializable dict"""
        return {"name": self.name, "type": self.type, "value": self.value, "indexed": self.indexed}


@dataclass(frozen=True, slots=True)
class DecodedCall:
    """Function Decoding Result"""

    descriptor: AbiDescriptor
    selector: str
    params: list[DecodedParameter] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def signature(self) -> str:
        return self.descriptor.signature

    @property
    def state_mutability(self) -> str:
        return self.descriptor.display_mutability

    def to_dict(self) -> dict[str, Any]:
        """Returns JSON serializable dict used for exporting decoded calls"""
        return {
            "name": self.name,
            "signature": self.signature,
            "selector": self.selector,
            "stateMutability": self.state_mutability,
            "params": [{"name": p.name, "type": p.type, "value": p.value} for p in self.params],
        }


@dataclass(frozen=True, slots=True)
class DecodedEvent:
    """Event Decoding Result"""

    name: str
    signature: str
    address: str
    params: list[DecodedParameter] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Returns JSON serializable dict used for exporting decoded events"""
        return {
            "name": self.name,
            "signature": self.signature,
            "address": self.address,
            "params": [p.to_dict() for p in self.params],
        }
