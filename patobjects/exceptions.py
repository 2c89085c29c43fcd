"""Exceptions raised by PAT object accessors

All errors are raised synchronously to the caller. Accessors whose
applicability can be checked beforehand (``Jet.is_calo_jet``,
``Jet.has_corr_factors``, ...) raise these when that check is skipped.
"""


class PATException(Exception):
    """Base class for all patobjects errors"""

    pass


class TypeMismatch(PATException, TypeError):
    """A type-specific view was requested that does not apply to this object"""

    pass


class ReferenceUnavailable(PATException, LookupError):
    """A reference was set, but the product it points to can no longer be found"""

    pass


class NoCorrectionsAvailable(PATException, LookupError):
    """The jet carries no jet energy correction factors"""

    pass


class UnknownCorrectionStep(PATException, LookupError):
    """The requested correction step or flavour is not defined"""

    pass


class UnknownCorrectionSet(PATException, LookupError):
    """No correction factor set with the requested label"""

    pass


class UnknownDiscriminator(PATException, LookupError):
    """No b-tag discriminator with the requested label"""

    pass


class IndexOutOfRange(PATException, IndexError):
    pass


__all__ = [
    "PATException",
    "TypeMismatch",
    "ReferenceUnavailable",
    "NoCorrectionsAvailable",
    "UnknownCorrectionStep",
    "UnknownCorrectionSet",
    "UnknownDiscriminator",
    "IndexOutOfRange",
]
