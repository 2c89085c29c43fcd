"""Templated PAT object container

`PATObject` wraps a copy of a reco object and augments it with resolution
information and a reference back to the object it was made from.
"""
import copy
from typing import Generic, Iterator, Optional, TypeVar

import numpy

from patobjects.references import Ref

ObjectType = TypeVar("ObjectType")


class PATObject(Generic[ObjectType]):
    """Base of all PAT objects

    Parameters
    ----------
        source : ObjectType or Ref, optional
            The reco object to wrap. A plain object is copied and leaves the
            reference to the original object null. A `Ref` is dereferenced, the
            referenced object copied, and the reference kept so that
            `original_object` can return it later. With no source, a default
            ``object_type()`` is wrapped.

    Attributes not defined by the PAT object are looked up on the wrapped reco
    object, so that e.g. ``patjet.pt`` is the transverse momentum of the jet.
    """

    object_type = None
    "Type of the wrapped object, default constructed when no source is given"

    def __init__(self, source=None):
        if isinstance(source, Ref):
            self._orig_ref = source
            reco = source.get()
        else:
            self._orig_ref = Ref()
            reco = source
        if reco is None and self.object_type is not None:
            reco = self.object_type()
        self._reco: Optional[ObjectType] = copy.copy(reco)
        self._res_et = 0.0
        self._res_eta = 0.0
        self._res_phi = 0.0
        self._res_a = 0.0
        self._res_b = 0.0
        self._res_c = 0.0
        self._res_d = 0.0
        self._res_theta = 0.0
        self._cov = numpy.zeros(0, dtype=numpy.float32)

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._reco, name)

    @property
    def reco(self) -> Optional[ObjectType]:
        """The wrapped copy of the reco object"""
        return self._reco

    def original_object(self) -> Optional[ObjectType]:
        """Access to the original object

        Returns None if this object was not made from a reference, and raises
        `ReferenceUnavailable` if the collection of the original object is not
        present any more.
        """
        if self._orig_ref.is_null():
            return None
        return self._orig_ref.get()

    @property
    def original_object_ref(self) -> Ref:
        """Reference to the original object; a null `Ref` if there is none"""
        return self._orig_ref

    def _references(self) -> Iterator[Ref]:
        yield self._orig_ref

    def attach(self, content):
        """Make all references held by this object resolve through ``content``"""
        content.attach(*self._references())

    def clone(self):
        """An independent copy of this object"""
        out = copy.copy(self)
        out._reco = copy.copy(self._reco)
        out._cov = self._cov.copy()
        return out

    @property
    def resolution_et(self) -> float:
        """Standard deviation on transverse energy"""
        return self._res_et

    @property
    def resolution_eta(self) -> float:
        """Standard deviation on pseudorapidity"""
        return self._res_eta

    @property
    def resolution_phi(self) -> float:
        """Standard deviation on azimuthal angle"""
        return self._res_phi

    @property
    def resolution_a(self) -> float:
        return self._res_a

    @property
    def resolution_b(self) -> float:
        return self._res_b

    @property
    def resolution_c(self) -> float:
        return self._res_c

    @property
    def resolution_d(self) -> float:
        return self._res_d

    @property
    def resolution_theta(self) -> float:
        """Standard deviation on polar angle"""
        return self._res_theta

    @property
    def cov_matrix(self) -> numpy.ndarray:
        """Covariance matrix elements"""
        return self._cov

    def set_resolution_et(self, et: float):
        self._res_et = float(et)

    def set_resolution_eta(self, eta: float):
        self._res_eta = float(eta)

    def set_resolution_phi(self, phi: float):
        self._res_phi = float(phi)

    def set_resolution_a(self, a: float):
        self._res_a = float(a)

    def set_resolution_b(self, b: float):
        self._res_b = float(b)

    def set_resolution_c(self, c: float):
        self._res_c = float(c)

    def set_resolution_d(self, d: float):
        self._res_d = float(d)

    def set_resolution_theta(self, theta: float):
        self._res_theta = float(theta)

    def set_cov_matrix(self, cov):
        self._cov = numpy.array(cov, dtype=numpy.float32)


__all__ = ["PATObject"]
