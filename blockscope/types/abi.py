from dataclasses import dataclass, field
from enum import Enum


class DescriptorKind(Enum):
    """ABI entry kinds retained by the parser.  All other kinds are dropped"""

    function = "function"
    constructor = "constructor"
    event = "event"


class StateMutability(Enum):
    """Solidity state mutability of a function"""

    pure = "pure"
    view = "view"
    nonpayable = "nonpayable"
    payable = "payable"


@dataclass(frozen=True, slots=True)
class AbiParameter:
    """Single named & typed slot in a function or event signature"""

    type: str
    name: str = ""

    indexed: bool = False
    """ Only meaningful for event inputs.  True if the value is stored in a log topic """

    components: tuple["AbiParameter", ...] = ()
    """ Members of a tuple type.  Empty for non-tuple types """


@dataclass(frozen=True, slots=True)
class AbiDescriptor:
    """
    Function, constructor or event parsed from ABI JSON.  Descriptors are immutable, and can be shared
    between threads & decoding calls.
    """

    kind: DescriptorKind
    name: str = ""
    inputs: tuple[AbiParameter, ...] = ()
    outputs: tuple[AbiParameter, ...] = ()
    state_mutability: StateMutability | None = None
    anonymous: bool = False

    raw: dict = field(default_factory=dict, compare=False, hash=False, repr=False)
    """ Original ABI JSON entry.  Kept for exporting & persisting ABIs """

    @property
    def signature(self) -> str:
        """Canonical signature, ie ``transfer(address,uint256)``"""
        # pylint: disable=import-outside-toplevel
        from blockscope.decoding.selectors import abi_to_signature

        return abi_to_signature(self)

    @property
    def display_mutability(self) -> str:
        """State mutability for display.  Functions without stateMutability are treated as nonpayable"""
        if self.state_mutability is None:
            return StateMutability.nonpayable.value
        return self.state_mutability.value

    def id_str(self, full_signature: bool = True) -> str:
        """Returns the canonical signature if full_signature is True, otherwise returns the name"""
        if full_signature:
            return self.signature
        return self.name
