"""Lorentz vector class mixins

The same mixins serve single objects (an `awkward.Record`, e.g. the four-momentum
of one jet) and collections (an `awkward.Array`, e.g. the constituents of a jet).
Operations that produce new vectors return a record when their inputs were
scalars and an array otherwise.

A small example::

    import awkward as ak
    from patobjects.methods import vector

    p4 = ak.Record(
        {"pt": 40.0, "eta": 0.5, "phi": 1.2, "mass": 8.0},
        with_name="PtEtaPhiMLorentzVector",
        behavior=vector.behavior,
    )
    assert abs(p4.scale(1.1).pt - 44.0) < 1e-9

"""
import numpy
import awkward


behavior = {}
_default_behavior = behavior


def _scalar(value):
    return value.item() if isinstance(value, numpy.generic) else value


def build(fields, with_name, behavior=None):
    """Zip ``fields`` into a named record, or a named array if any field is an array"""
    if behavior is None:
        behavior = _default_behavior
    if any(isinstance(v, (awkward.Array, numpy.ndarray)) for v in fields.values()):
        return awkward.zip(fields, with_name=with_name, behavior=behavior)
    return awkward.Record(
        {k: _scalar(v) for k, v in fields.items()},
        with_name=with_name,
        behavior=behavior,
    )


@awkward.mixin_class(behavior)
class LorentzVector:
    """A cartesian Lorentz vector

    (+, -, -, -) metric, with a momentum interpretation of the components.
    This mixin class requires the parent class to provide items `x`, `y`, `z`, and `t`.
    """

    @property
    def px(self):
        """Alias for `x`"""
        return self.x

    @property
    def py(self):
        """Alias for `y`"""
        return self.y

    @property
    def pz(self):
        """Alias for `z`"""
        return self.z

    @property
    def energy(self):
        """Alias for `t`"""
        return self.t

    @property
    def pt(self):
        r"""Transverse momentum

        :math:`\sqrt{x^2+y^2}`
        """
        return numpy.hypot(self.x, self.y)

    @property
    def phi(self):
        r"""Azimuthal angle relative to X axis

        :math:`\text{arctan2}(y, x)`
        """
        return numpy.arctan2(self.y, self.x)

    @property
    def p(self):
        r"""Momentum magnitude

        :math:`\sqrt{x^2+y^2+z^2}`
        """
        return numpy.sqrt(self.pt ** 2 + self.z ** 2)

    @property
    def theta(self):
        """Polar angle relative to the Z axis"""
        return numpy.arctan2(self.pt, self.z)

    @property
    def eta(self):
        r"""Pseudorapidity

        :math:`\text{arcsinh}(z/p_T)`
        """
        return numpy.arcsinh(self.z / self.pt)

    @property
    def mass2(self):
        """Squared `mass`"""
        return self.t ** 2 - self.p ** 2

    @property
    def mass(self):
        r"""Invariant mass

        :math:`\sqrt{t^2-x^2-y^2-z^2}`
        """
        return numpy.sqrt(self.mass2)

    @property
    def et(self):
        r"""Transverse energy

        :math:`E \sin\theta`
        """
        return self.energy * numpy.sin(self.theta)

    def scale(self, factor):
        """Multiply all four components by a non-negative ``factor``"""
        return build(
            {
                "x": self.x * factor,
                "y": self.y * factor,
                "z": self.z * factor,
                "t": self.t * factor,
            },
            "LorentzVector",
            self.behavior,
        )

    def sum(self, axis=-1):
        """Sum a collection of vectors using `x`, `y`, `z`, and `t` components"""
        return build(
            {
                "x": awkward.sum(self.x, axis=axis),
                "y": awkward.sum(self.y, axis=axis),
                "z": awkward.sum(self.z, axis=axis),
                "t": awkward.sum(self.t, axis=axis),
            },
            "LorentzVector",
            self.behavior,
        )

    def delta_phi(self, other):
        """Difference in azimuthal angle, within [-pi, pi)"""
        return (self.phi - other.phi + numpy.pi) % (2 * numpy.pi) - numpy.pi

    def delta_r(self, other):
        r"""Distance between two Lorentz vectors in (eta,phi) plane

        :math:`\sqrt{\Delta\eta^2 + \Delta\phi^2}`
        """
        return numpy.hypot(self.eta - other.eta, self.delta_phi(other))


@awkward.mixin_class(behavior)
class PtEtaPhiMLorentzVector(LorentzVector):
    """A Lorentz vector using pseudorapidity and mass

    This mixin class requires the parent class to provide items `pt`, `eta`, `phi`, and `mass`.
    """

    @property
    def pt(self):
        return self["pt"]

    @property
    def eta(self):
        return self["eta"]

    @property
    def phi(self):
        return self["phi"]

    @property
    def mass(self):
        return self["mass"]

    @property
    def x(self):
        return self.pt * numpy.cos(self.phi)

    @property
    def y(self):
        return self.pt * numpy.sin(self.phi)

    @property
    def z(self):
        r""":math:`p_T \sinh(\eta)`"""
        return self.pt * numpy.sinh(self.eta)

    @property
    def p(self):
        r""":math:`p_T \cosh(\eta)`"""
        return self.pt * numpy.cosh(self.eta)

    @property
    def theta(self):
        r""":math:`2\text{arctan}(e^{-\eta})`"""
        return 2 * numpy.arctan(numpy.exp(-self.eta))

    @property
    def t(self):
        r""":math:`\sqrt{p^2+m^2}`"""
        return numpy.hypot(self.p, self.mass)

    def scale(self, factor):
        """Multiply all four components by a non-negative ``factor``

        This directly adjusts `pt` and `mass`, leaving the direction untouched.
        """
        return build(
            {
                "pt": self.pt * factor,
                "eta": self.eta,
                "phi": self.phi,
                "mass": self.mass * factor,
            },
            "PtEtaPhiMLorentzVector",
            self.behavior,
        )


@awkward.mixin_class(behavior)
class PtEtaPhiELorentzVector(LorentzVector):
    """A Lorentz vector using pseudorapidity and energy

    This mixin class requires the parent class to provide items `pt`, `eta`, `phi`, and `energy`.
    """

    @property
    def pt(self):
        return self["pt"]

    @property
    def eta(self):
        return self["eta"]

    @property
    def phi(self):
        return self["phi"]

    @property
    def energy(self):
        return self["energy"]

    @property
    def t(self):
        return self["energy"]

    @property
    def x(self):
        return self.pt * numpy.cos(self.phi)

    @property
    def y(self):
        return self.pt * numpy.sin(self.phi)

    @property
    def z(self):
        return self.pt * numpy.sinh(self.eta)

    @property
    def p(self):
        return self.pt * numpy.cosh(self.eta)

    @property
    def theta(self):
        return 2 * numpy.arctan(numpy.exp(-self.eta))

    def scale(self, factor):
        """Multiply all four components by a non-negative ``factor``

        This directly adjusts `pt` and `energy`.
        """
        return build(
            {
                "pt": self.pt * factor,
                "eta": self.eta,
                "phi": self.phi,
                "energy": self.energy * factor,
            },
            "PtEtaPhiELorentzVector",
            self.behavior,
        )


def ptetaphim(pt, eta, phi, mass):
    """Build a `PtEtaPhiMLorentzVector` record (scalar inputs) or array"""
    return build(
        {"pt": pt, "eta": eta, "phi": phi, "mass": mass}, "PtEtaPhiMLorentzVector"
    )


__all__ = [
    "LorentzVector",
    "PtEtaPhiMLorentzVector",
    "PtEtaPhiELorentzVector",
    "build",
    "ptetaphim",
]
