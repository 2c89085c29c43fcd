"""Physics object candidate mixins

Candidates are Lorentz vectors with a charge. Jet constituents come in two
kinds, calorimeter towers and particle-flow candidates, distinguished by the
record name so that ``isinstance(constituent, CaloTower)`` tells them apart.
"""
import numpy
import awkward
from patobjects.methods import vector


behavior = dict(vector.behavior)


@awkward.mixin_class(behavior)
class Candidate(vector.PtEtaPhiMLorentzVector):
    """A Lorentz vector in pt, eta, phi, mass coordinates with charge

    This mixin class requires the parent class to provide items `pt`, `eta`, `phi`, `mass`, and `charge`.
    """

    def sum(self, axis=-1):
        """Sum a collection of candidates, adding up the charges as well"""
        return vector.build(
            {
                "x": awkward.sum(self.x, axis=axis),
                "y": awkward.sum(self.y, axis=axis),
                "z": awkward.sum(self.z, axis=axis),
                "t": awkward.sum(self.t, axis=axis),
                "charge": awkward.sum(self.charge, axis=axis),
            },
            "CartesianCandidate",
            self.behavior,
        )


@awkward.mixin_class(behavior)
class CartesianCandidate(vector.LorentzVector):
    """A cartesian Lorentz vector with charge, as obtained by summing candidates"""

    pass


@awkward.mixin_class(behavior)
class CaloTower(vector.PtEtaPhiELorentzVector):
    """A calorimeter tower jet constituent

    This mixin class requires the items `pt`, `eta`, `phi`, `energy`, `emEnergy`,
    `hadEnergy`, and `outerEnergy`.
    """

    @property
    def emEt(self):
        """Electromagnetic part of the transverse energy"""
        return self.emEnergy * numpy.sin(self.theta)

    @property
    def hadEt(self):
        """Hadronic part of the transverse energy"""
        return self.hadEnergy * numpy.sin(self.theta)


@awkward.mixin_class(behavior)
class PFCandidate(Candidate):
    """A particle-flow candidate jet constituent

    This mixin class additionally requires the item `pdgId`.
    """

    pass


@awkward.mixin_class(behavior)
class Track(Candidate):
    """A reconstructed track, with transverse and longitudinal impact parameters `dxy` and `dz`"""

    pass


@awkward.mixin_class(behavior)
class GenParticle(Candidate):
    """A generator-level particle with `pdgId` and `status`"""

    pass


def candidate_array(name, **fields):
    """Zip equal-length columns into an array of ``name`` records"""
    return awkward.zip(fields, with_name=name, behavior=behavior)


def candidate(name, **fields):
    """Build a single ``name`` record"""
    return vector.build(fields, name, behavior)


__all__ = [
    "Candidate",
    "CartesianCandidate",
    "CaloTower",
    "PFCandidate",
    "Track",
    "GenParticle",
    "candidate_array",
    "candidate",
]
