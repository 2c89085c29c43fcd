import os

import pytest

from patobjects.jet import Jet
from patobjects.methods.candidate import candidate_array
from patobjects.reco import CaloJet, CaloSpecific, PFJet, PFSpecific
from patobjects.references import EventContent


# deliberately not energy ordered
TOWER_ENERGIES = [10.0, 40.0, 5.0, 30.0, 15.0]


@pytest.fixture(scope="module")
def tests_directory() -> str:
    return os.path.dirname(os.path.realpath(__file__))


@pytest.fixture
def content():
    content = EventContent()
    content.put(
        "towers",
        candidate_array(
            "CaloTower",
            pt=TOWER_ENERGIES,
            eta=[0.0] * 5,
            phi=[0.1, 0.7, -1.3, 2.2, -2.9],
            energy=TOWER_ENERGIES,
            emEnergy=[4.0, 10.0, 5.0, 6.0, 0.0],
            hadEnergy=[6.0, 30.0, 0.0, 24.0, 15.0],
            outerEnergy=[0.0] * 5,
        ),
    )
    content.put(
        "pfCandidates",
        candidate_array(
            "PFCandidate",
            pt=[20.0, 10.0, 5.0],
            eta=[0.0, 0.0, 0.0],
            phi=[0.1, 0.2, 0.3],
            mass=[0.0, 0.0, 0.0],
            charge=[1, -1, 0],
            pdgId=[211, -211, 22],
        ),
    )
    content.put(
        "tracks",
        candidate_array(
            "Track",
            pt=[12.0, 7.0, 3.0],
            eta=[0.2, -0.1, 0.4],
            phi=[0.5, 0.6, 0.4],
            mass=[0.13957] * 3,
            charge=[1, -1, 1],
            dxy=[0.01, -0.02, 0.15],
            dz=[0.1, 0.05, -0.3],
        ),
    )
    content.put(
        "genParticles",
        candidate_array(
            "GenParticle",
            pt=[45.0, 30.0],
            eta=[0.1, -1.2],
            phi=[0.5, 2.5],
            mass=[4.7, 0.0],
            charge=[-1, 0],
            pdgId=[5, 21],
            status=[23, 23],
        ),
    )
    return content


@pytest.fixture
def calo_specific():
    return CaloSpecific(
        max_e_in_em_towers=10.0,
        max_e_in_had_towers=30.0,
        had_energy_in_ho=0.5,
        had_energy_in_hb=60.0,
        had_energy_in_hf=0.0,
        had_energy_in_he=14.5,
        em_energy_in_eb=20.0,
        em_energy_in_ee=5.0,
        em_energy_in_hf=0.0,
        energy_fraction_hadronic=0.75,
        energy_fraction_em=0.25,
        towers_area=0.21,
    )


@pytest.fixture
def calo_jet(content, calo_specific):
    return CaloJet.from_daughters(
        content.ref_vector("towers"), specific=calo_specific
    )


@pytest.fixture
def pf_jet(content):
    return PFJet.from_daughters(
        content.ref_vector("pfCandidates"),
        specific=PFSpecific(
            charged_hadron_energy=30.0,
            neutral_em_energy=5.0,
            charged_multiplicity=2,
            neutral_multiplicity=1,
        ),
    )


@pytest.fixture
def pat_calo_jet(content, calo_jet):
    content.put("caloJets", [calo_jet])
    return Jet(content.ref("caloJets", 0))


@pytest.fixture
def pat_pf_jet(content, pf_jet):
    content.put("pfJets", [pf_jet])
    return Jet(content.ref("pfJets", 0))
