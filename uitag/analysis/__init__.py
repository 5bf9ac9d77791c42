"""Static analysis helpers shared by the injector and the extractor."""

from .attributes import IdentifierSite, element_identifier, existing_identifier, object_identifier
from .literals import Classification, Verdict, classify_attribute, classify_call, classify_value

__all__ = [
    "Classification",
    "IdentifierSite",
    "Verdict",
    "classify_attribute",
    "classify_call",
    "classify_value",
    "element_identifier",
    "existing_identifier",
    "object_identifier",
]
