"""Awkward behaviors for the kinematics of PAT objects and their constituents"""
from patobjects.methods.vector import (
    LorentzVector,
    PtEtaPhiMLorentzVector,
    PtEtaPhiELorentzVector,
)
from patobjects.methods.candidate import (
    Candidate,
    CartesianCandidate,
    CaloTower,
    PFCandidate,
    Track,
    GenParticle,
)
