from .abi import AbiDescriptor, AbiParameter, DescriptorKind, StateMutability
from .decoding import DecodedCall, DecodedEvent, DecodedParameter
