"""Reconstructed jets

These are the source objects wrapped by `patobjects.jet.Jet`. A `BasicJet`
carries a four-momentum and references to its constituents (daughters);
`CaloJet`, `PFJet` and `GenJet` add the quantities specific to how the jet was
reconstructed.
"""
from dataclasses import dataclass, field

import awkward

from patobjects.methods import vector
from patobjects.references import RefVector


@dataclass
class CaloSpecific:
    """Quantities of a jet clustered from calorimeter towers"""

    max_e_in_em_towers: float = 0.0
    max_e_in_had_towers: float = 0.0
    had_energy_in_ho: float = 0.0
    had_energy_in_hb: float = 0.0
    had_energy_in_hf: float = 0.0
    had_energy_in_he: float = 0.0
    em_energy_in_eb: float = 0.0
    em_energy_in_ee: float = 0.0
    em_energy_in_hf: float = 0.0
    energy_fraction_hadronic: float = 0.0
    energy_fraction_em: float = 0.0
    towers_area: float = 0.0


@dataclass
class PFSpecific:
    """Per particle type energy sums and multiplicities of a particle-flow jet"""

    charged_hadron_energy: float = 0.0
    neutral_hadron_energy: float = 0.0
    charged_em_energy: float = 0.0
    charged_mu_energy: float = 0.0
    neutral_em_energy: float = 0.0
    charged_multiplicity: int = 0
    neutral_multiplicity: int = 0
    muon_multiplicity: int = 0


@dataclass
class GenSpecific:
    em_energy: float = 0.0
    had_energy: float = 0.0
    invisible_energy: float = 0.0
    auxiliary_energy: float = 0.0


def _zero_p4():
    return vector.ptetaphim(0.0, 0.0, 0.0, 0.0)


def _sum_p4(constituents):
    if isinstance(constituents, awkward.Array):
        return constituents.sum()
    # list products hold individual records
    return vector.build(
        {c: sum(getattr(p, c) for p in constituents) for c in ("x", "y", "z", "t")},
        "LorentzVector",
    )


@dataclass(eq=False)
class BasicJet:
    """A jet: a four-momentum plus references to its constituents"""

    p4: awkward.Record = field(default_factory=_zero_p4)
    daughters: RefVector = field(default_factory=RefVector)
    charge: float = 0.0

    @classmethod
    def from_daughters(cls, daughters, **kwargs):
        """Build a jet whose four-momentum is the sum of the referenced constituents"""
        if len(daughters) == 0:
            return cls(daughters=daughters, **kwargs)
        return cls(p4=_sum_p4(daughters.resolve()), daughters=daughters, **kwargs)

    @property
    def pt(self):
        return self.p4.pt

    @property
    def eta(self):
        return self.p4.eta

    @property
    def phi(self):
        return self.p4.phi

    @property
    def mass(self):
        return self.p4.mass

    @property
    def energy(self):
        return self.p4.energy

    @property
    def et(self):
        return self.p4.et

    @property
    def px(self):
        return self.p4.px

    @property
    def py(self):
        return self.p4.py

    @property
    def pz(self):
        return self.p4.pz

    def set_p4(self, p4):
        self.p4 = p4

    def number_of_daughters(self):
        return len(self.daughters)

    def daughter(self, i):
        """The i-th constituent, resolved from the constituent product"""
        return self.daughters[i]


@dataclass(eq=False)
class CaloJet(BasicJet):
    specific: CaloSpecific = field(default_factory=CaloSpecific)


@dataclass(eq=False)
class PFJet(BasicJet):
    specific: PFSpecific = field(default_factory=PFSpecific)


@dataclass(eq=False)
class GenJet(BasicJet):
    """A jet clustered from generator-level particles"""

    specific: GenSpecific = field(default_factory=GenSpecific)

    @property
    def em_energy(self):
        return self.specific.em_energy

    @property
    def had_energy(self):
        return self.specific.had_energy

    @property
    def invisible_energy(self):
        return self.specific.invisible_energy


__all__ = [
    "CaloSpecific",
    "PFSpecific",
    "GenSpecific",
    "BasicJet",
    "CaloJet",
    "PFJet",
    "GenJet",
]
