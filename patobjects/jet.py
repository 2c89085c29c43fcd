"""Analysis-level jet

`Jet` wraps a reco jet (`BasicJet`, `CaloJet` or `PFJet`) and adds jet energy
correction bookkeeping, b-tagging information, MC matching, track association
and optional embedding of the constituents.

A jet is filled once by a producer through the ``set_*``/``add_*`` methods and
only read afterwards::

    jet = Jet(event.ref("caloJets", 0))
    jet.set_corr_factors(JetCorrFactors("default", factors={"off": 0.9, "rel": 1.1, "abs": 1.2}))
    jet.set_corr_step("abs")
    raw = jet.corrected_jet("raw")
"""
import copy
import logging
from typing import List, Optional, Tuple, Type

import awkward
import numpy

from patobjects import config
from patobjects.exceptions import (
    IndexOutOfRange,
    NoCorrectionsAvailable,
    TypeMismatch,
    UnknownCorrectionSet,
    UnknownDiscriminator,
)
from patobjects.jetcorr import RAW, CorrStep, JetCorrFactors
from patobjects.methods import candidate
from patobjects.patobject import PATObject
from patobjects.reco import BasicJet, CaloJet, CaloSpecific, GenJet, PFJet, PFSpecific
from patobjects.references import Ref, RefVector
from patobjects.taginfo import (
    BaseTagInfo,
    SecondaryVertexTagInfo,
    SoftLeptonTagInfo,
    TagInfoCollection,
    TrackIPTagInfo,
)

logger = logging.getLogger(__name__)


def _fraction(quantity, energy):
    # zero energy gives inf or nan, no guard
    with numpy.errstate(divide="ignore", invalid="ignore"):
        return numpy.float32(quantity) / numpy.float32(energy)


def _energies(constituents):
    if isinstance(constituents, awkward.Array):
        return numpy.asarray(constituents.energy, dtype=numpy.float64)
    return numpy.array([c.energy for c in constituents], dtype=numpy.float64)


class Jet(PATObject[BasicJet]):
    """Analysis-level jet

    Parameters
    ----------
        source : BasicJet or Ref, optional
            The reco jet to wrap, or a reference to it. The calorimeter or
            particle-flow specific information of a `CaloJet` or `PFJet` is
            imported at construction.
    """

    object_type = BasicJet

    def __init__(self, source=None):
        super().__init__(source)
        self._embedded_calo_towers = False
        self._calo_towers = None
        self._gen_jet: List[GenJet] = []
        self._gen_parton_ref = Ref()
        self._gen_parton = []
        self._parton_flavour = 0
        self._corr_step: CorrStep = RAW
        self._corr_factors: List[JetCorrFactors] = []
        self._pair_discri: List[Tuple[str, float]] = []
        self._tag_infos = TagInfoCollection()
        self._jet_charge = 0.0
        self._associated_tracks = RefVector()
        self._specific_calo: List[CaloSpecific] = []
        self._specific_pf: List[PFSpecific] = []
        self._try_import_specific(self._reco)

    def _try_import_specific(self, source):
        if isinstance(source, CaloJet):
            self._specific_calo = [copy.copy(source.specific)]
        elif isinstance(source, PFJet):
            self._specific_pf = [copy.copy(source.specific)]

    def __repr__(self):
        return "<Jet pt=%.2f eta=%.3f phi=%.3f corr=%s>" % (
            self.pt,
            self.eta,
            self.phi,
            self._corr_step,
        )

    def clone(self) -> "Jet":
        out = super().clone()
        out._gen_jet = list(self._gen_jet)
        out._gen_parton = list(self._gen_parton)
        out._corr_factors = list(self._corr_factors)
        out._pair_discri = list(self._pair_discri)
        out._tag_infos = copy.copy(self._tag_infos)
        out._specific_calo = list(self._specific_calo)
        out._specific_pf = list(self._specific_pf)
        return out

    def _references(self):
        yield from super()._references()
        yield self._reco.daughters
        yield self._associated_tracks
        yield self._gen_parton_ref
        for _, info in self._tag_infos:
            yield info.tracks

    # ---- MC matching ----

    @property
    def gen_jet(self) -> Optional[GenJet]:
        """The matched generated jet, None if there is none"""
        return self._gen_jet[0] if self._gen_jet else None

    def set_gen_jet(self, gen_jet: GenJet):
        self._gen_jet = [copy.copy(gen_jet)]

    def gen_parton(self):
        """The matched generated parton, None if there is none"""
        if self._gen_parton:
            return self._gen_parton[0]
        return self._gen_parton_ref.get()

    def set_gen_parton(self, ref: Ref, embed: bool = False):
        """Set the reference to the matched parton, optionally embedding a copy of it"""
        self._gen_parton_ref = ref
        self._gen_parton = [ref.get()] if embed and not ref.is_null() else []

    @property
    def parton_flavour(self) -> int:
        """Flavour of the parton underlying the jet, 0 if not set"""
        return self._parton_flavour

    def set_parton_flavour(self, flavour: int):
        self._parton_flavour = int(flavour)

    # ---- jet energy corrections ----

    def _corr_factor_set(self, set_label: Optional[str] = None) -> JetCorrFactors:
        if not self._corr_factors:
            raise NoCorrectionsAvailable(
                "This jet carries no jet energy correction factors"
            )
        if set_label is None:
            return self._corr_factors[0]
        for factors in self._corr_factors:
            if factors.label == set_label:
                return factors
        raise UnknownCorrectionSet(
            "No jet correction factor set %r; available sets are: %s"
            % (set_label, ", ".join(self.corr_factor_set_labels()))
        )

    def has_corr_factors(self) -> bool:
        return len(self._corr_factors) > 0

    def has_corr_factor_set(self, label: str) -> bool:
        return any(factors.label == label for factors in self._corr_factors)

    def corr_factor_set_label(self) -> str:
        """Label of the current set of correction factors"""
        return self._corr_factor_set().label

    def corr_factor_set_labels(self) -> List[str]:
        return [factors.label for factors in self._corr_factors]

    def corr_step(self) -> str:
        """Name of the correction step the four-momentum currently corresponds to"""
        return self._corr_step.name

    def corr_flavour(self) -> str:
        """Flavour of the current correction step, empty for flavour independent steps"""
        return self._corr_step.flavour

    def corr_factor(
        self, step, flavour: str = "", set_label: Optional[str] = None
    ) -> float:
        """Total factor to go from the current correction step to ``step``

        Uses the current set of correction factors, or the one labelled ``set_label``.
        """
        factors = self._corr_factor_set(set_label)
        return factors.correction(factors.corr_step(step, flavour), self._corr_step)

    def corrected_jet(
        self, step, flavour: str = "", set_label: Optional[str] = None
    ) -> "Jet":
        """Copy of this jet corrected to ``step``; this jet is left untouched"""
        factors = self._corr_factor_set(set_label)
        target = factors.corr_step(step, flavour)
        out = self.clone()
        out._reco.set_p4(
            self._reco.p4.scale(factors.correction(target, self._corr_step))
        )
        out._corr_step = target
        return out

    def set_corr_step(self, step):
        """Record which correction step the four-momentum corresponds to, without rescaling it

        ``step`` is a `CorrStep`, or a step name resolved in the current set.
        """
        if not isinstance(step, CorrStep):
            step = self._corr_factor_set().corr_step(step)
        self._corr_step = step

    def set_corr_factors(self, factors: JetCorrFactors):
        """Replace all correction factor sets by ``factors``, which becomes the current set"""
        if self._corr_factors:
            logger.debug(
                "Replacing correction sets %s by %r",
                self.corr_factor_set_labels(),
                factors.label,
            )
        self._corr_factors = [factors]

    def add_corr_factors(self, factors: JetCorrFactors):
        """Add a further set of correction factors, e.g. for systematic studies"""
        self._corr_factors.append(factors)

    # ---- b-tagging ----

    def b_discriminator(self, label: str = "") -> float:
        """Value of the b-tag discriminator ``label``

        An empty label or ``default`` selects the ``default_discriminator`` setting.
        Raises `UnknownDiscriminator` if the jet has no such discriminator.
        """
        if label in ("", "default"):
            label = config.get_settings().default_discriminator
        for name, value in self._pair_discri:
            if name == label:
                return value
        raise UnknownDiscriminator(
            "This jet has no b-tag discriminator %r" % label
        )

    @property
    def discriminator_pairs(self) -> List[Tuple[str, float]]:
        """All (label, value) discriminator pairs, in insertion order"""
        return list(self._pair_discri)

    def add_b_discriminator_pair(self, pair: Tuple[str, float]):
        label, value = pair
        self._pair_discri.append((label, float(value)))

    @property
    def tag_info_labels(self) -> List[str]:
        return self._tag_infos.labels

    def tag_info(self, label: str) -> Optional[BaseTagInfo]:
        """The tag info with the given label (the ``TagInfos`` suffix may be omitted), or None"""
        return self._tag_infos.get(label)

    def tag_info_of_type(
        self, kind: Type[BaseTagInfo], label: str = ""
    ) -> Optional[BaseTagInfo]:
        """The tag info ``label`` if it is a ``kind``, or without label the first one of type ``kind``"""
        return self._tag_infos.of_type(kind, label)

    def tag_info_track_ip(self, label: str = "") -> Optional[TrackIPTagInfo]:
        return self.tag_info_of_type(TrackIPTagInfo, label)

    def tag_info_soft_lepton(self, label: str = "") -> Optional[SoftLeptonTagInfo]:
        return self.tag_info_of_type(SoftLeptonTagInfo, label)

    def tag_info_secondary_vertex(
        self, label: str = ""
    ) -> Optional[SecondaryVertexTagInfo]:
        return self.tag_info_of_type(SecondaryVertexTagInfo, label)

    def add_tag_info(self, label: str, info: BaseTagInfo):
        self._tag_infos.add(label, info)

    # ---- tracks ----

    @property
    def jet_charge(self) -> float:
        return self._jet_charge

    def set_jet_charge(self, charge: float):
        self._jet_charge = float(charge)

    @property
    def associated_tracks(self) -> RefVector:
        """References to the tracks associated to this jet"""
        return self._associated_tracks

    def set_associated_tracks(self, tracks: RefVector):
        self._associated_tracks = tracks

    # ---- jet type ----

    @property
    def is_calo_jet(self) -> bool:
        return len(self._specific_calo) > 0

    @property
    def is_pf_jet(self) -> bool:
        return len(self._specific_pf) > 0

    @property
    def is_basic_jet(self) -> bool:
        return not (self.is_calo_jet or self.is_pf_jet)

    @property
    def calo_specific(self) -> CaloSpecific:
        if not self._specific_calo:
            raise TypeMismatch("This PAT jet was not made from a CaloJet.")
        return self._specific_calo[0]

    @property
    def pf_specific(self) -> PFSpecific:
        if not self._specific_pf:
            raise TypeMismatch("This PAT jet was not made from a PFJet.")
        return self._specific_pf[0]

    # ---- calorimeter jet quantities ----

    @property
    def max_e_in_em_towers(self) -> float:
        """Maximum energy deposited in ECAL towers"""
        return self.calo_specific.max_e_in_em_towers

    @property
    def max_e_in_had_towers(self) -> float:
        """Maximum energy deposited in HCAL towers"""
        return self.calo_specific.max_e_in_had_towers

    @property
    def energy_fraction_hadronic(self) -> float:
        return self.calo_specific.energy_fraction_hadronic

    @property
    def em_energy_fraction(self) -> float:
        return self.calo_specific.energy_fraction_em

    @property
    def had_energy_in_hb(self) -> float:
        return self.calo_specific.had_energy_in_hb

    @property
    def had_energy_in_ho(self) -> float:
        return self.calo_specific.had_energy_in_ho

    @property
    def had_energy_in_he(self) -> float:
        return self.calo_specific.had_energy_in_he

    @property
    def had_energy_in_hf(self) -> float:
        return self.calo_specific.had_energy_in_hf

    @property
    def em_energy_in_eb(self) -> float:
        return self.calo_specific.em_energy_in_eb

    @property
    def em_energy_in_ee(self) -> float:
        return self.calo_specific.em_energy_in_ee

    @property
    def em_energy_in_hf(self) -> float:
        """Electromagnetic energy extracted from HF"""
        return self.calo_specific.em_energy_in_hf

    @property
    def towers_area(self) -> float:
        """Area of the contributing towers"""
        return self.calo_specific.towers_area

    @property
    def n90(self) -> int:
        """Number of constituents carrying 90% of the jet energy"""
        return self.n_carrying(0.9)

    @property
    def n60(self) -> int:
        """Number of constituents carrying 60% of the jet energy"""
        return self.n_carrying(0.6)

    def n_carrying(self, fraction: float) -> int:
        """Number of leading constituents needed to carry ``fraction`` of the constituent energy

        Constituents are ordered by decreasing energy. ``fraction >= 1`` gives
        all constituents, a jet without constituents gives 0.
        """
        constituents = self._all_constituents()
        if fraction >= 1:
            return len(constituents)
        if len(constituents) == 0:
            return 0
        cumulative = numpy.cumsum(numpy.sort(_energies(constituents))[::-1])
        reached = numpy.flatnonzero(cumulative >= fraction * cumulative[-1])
        return int(reached[0]) + 1 if len(reached) else 0

    # ---- particle-flow jet quantities ----

    @property
    def charged_hadron_energy(self) -> float:
        return self.pf_specific.charged_hadron_energy

    @property
    def charged_hadron_energy_fraction(self) -> float:
        return _fraction(self.charged_hadron_energy, self._reco.energy)

    @property
    def neutral_hadron_energy(self) -> float:
        return self.pf_specific.neutral_hadron_energy

    @property
    def neutral_hadron_energy_fraction(self) -> float:
        return _fraction(self.neutral_hadron_energy, self._reco.energy)

    @property
    def charged_em_energy(self) -> float:
        return self.pf_specific.charged_em_energy

    @property
    def charged_em_energy_fraction(self) -> float:
        return _fraction(self.charged_em_energy, self._reco.energy)

    @property
    def charged_mu_energy(self) -> float:
        return self.pf_specific.charged_mu_energy

    @property
    def charged_mu_energy_fraction(self) -> float:
        return _fraction(self.charged_mu_energy, self._reco.energy)

    @property
    def neutral_em_energy(self) -> float:
        return self.pf_specific.neutral_em_energy

    @property
    def neutral_em_energy_fraction(self) -> float:
        return _fraction(self.neutral_em_energy, self._reco.energy)

    @property
    def charged_multiplicity(self) -> int:
        return self.pf_specific.charged_multiplicity

    @property
    def neutral_multiplicity(self) -> int:
        return self.pf_specific.neutral_multiplicity

    @property
    def muon_multiplicity(self) -> int:
        return self.pf_specific.muon_multiplicity

    # ---- constituents ----

    def set_calo_towers(self, towers):
        """Embed copies of the calorimeter towers and serve the constituents from them

        ``towers`` is a `RefVector` into a tower product or an awkward array of
        ``CaloTower`` records. Once embedded, the constituents remain accessible
        without the tower product.
        """
        if isinstance(towers, RefVector):
            towers = towers.resolve()
        if not isinstance(towers, awkward.Array):
            towers = awkward.Array(list(towers), behavior=candidate.behavior)
            # records taken out of a list product lose their name
            if len(towers) > 0:
                towers = awkward.with_name(
                    towers, "CaloTower", behavior=candidate.behavior
                )
        self._calo_towers = towers
        self._embedded_calo_towers = True
        logger.debug("Embedded %d calo towers", len(towers))

    @property
    def embedded_calo_towers(self) -> bool:
        return self._embedded_calo_towers

    def _constituent_storage(self):
        if self._embedded_calo_towers:
            return self._calo_towers
        return self._reco.daughters

    def _all_constituents(self):
        storage = self._constituent_storage()
        if isinstance(storage, RefVector):
            return storage.resolve()
        return storage

    def number_of_constituents(self) -> int:
        return len(self._constituent_storage())

    def constituent(self, i: int):
        """The i-th constituent, from the embedded towers if present"""
        storage = self._constituent_storage()
        if not 0 <= i < len(storage):
            raise IndexOutOfRange(
                "Constituent index %d out of range for %d constituents" % (i, len(storage))
            )
        return storage[i]

    def calo_constituent(self, i: int):
        """The i-th constituent if it is a calorimeter tower, else None"""
        out = self.constituent(i)
        return out if isinstance(out, candidate.CaloTower) else None

    def calo_constituents(self) -> list:
        return [self.calo_constituent(i) for i in range(self.number_of_constituents())]

    def pf_constituent(self, i: int):
        """The i-th constituent if it is a particle-flow candidate, else None"""
        out = self.constituent(i)
        return out if isinstance(out, candidate.PFCandidate) else None

    def pf_constituents(self) -> list:
        return [self.pf_constituent(i) for i in range(self.number_of_constituents())]


__all__ = ["Jet"]
