"""Domain exports."""

from .errors import (
    ActionFailed,
    DescriptorNotFound,
    DuplicateDescriptor,
    DestinationExists,
    DestinationPathInvalid,
    IncompatibleDescriptor,
    MalformedDescriptor,
    ScaffoldError,
    SourceNotFound,
    UnresolvedParameter,
)
from .template import ActionKind, ParameterSpec, SourceAction, TemplateDescriptor
from .view import ViewDescriptor

__all__ = [
    "ActionFailed",
    "ActionKind",
    "DescriptorNotFound",
    "DuplicateDescriptor",
    "DestinationExists",
    "DestinationPathInvalid",
    "IncompatibleDescriptor",
    "MalformedDescriptor",
    "ParameterSpec",
    "ScaffoldError",
    "SourceAction",
    "SourceNotFound",
    "TemplateDescriptor",
    "UnresolvedParameter",
    "ViewDescriptor",
]
