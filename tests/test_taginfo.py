import copy

import numpy as np
import pytest

from patobjects import config
from patobjects.references import RefVector
from patobjects.taginfo import (
    SecondaryVertexTagInfo,
    SoftLeptonProperties,
    SoftLeptonTagInfo,
    TagInfoCollection,
    TrackCountingTagInfo,
    TrackIPTagInfo,
)


class AdaptiveIPTagInfo(TrackIPTagInfo):
    pass


def test_track_ip():
    info = TrackIPTagInfo(
        ip2d_significance=np.array([1.0, 5.0, 3.0]),
        ip3d_significance=np.array([2.0, 1.0, 6.0]),
    )
    assert info.sorted_indices().tolist() == [2, 0, 1]
    assert info.sorted_indices("2d").tolist() == [1, 2, 0]
    assert len(info.tracks) == 0


def test_track_counting():
    info = TrackCountingTagInfo(significance=np.array([0.5, 4.0, 2.5]))
    assert info.discriminator(1) == pytest.approx(4.0)
    assert info.discriminator(2) == pytest.approx(2.5)
    assert info.discriminator(4) == -100.0
    assert info.discriminator(0) == -100.0


def test_soft_lepton(content):
    info = SoftLeptonTagInfo(
        leptons=content.ref_vector("tracks", [1]),
        properties=[SoftLeptonProperties(pt_rel=1.3, sip3d=2.1, delta_r=0.2)],
    )
    assert info.n_leptons == 1
    assert info.properties[0].pt_rel == pytest.approx(1.3)
    assert info.leptons[0].charge == -1


def test_secondary_vertex():
    info = SecondaryVertexTagInfo(
        vertex_mass=np.array([1.8, 0.9]),
        flight_distance=np.array([0.4, 0.1]),
        flight_distance_error=np.array([0.05, 0.05]),
    )
    assert info.n_vertices == 2
    assert info.flight_distance_significance(0) == pytest.approx(8.0)
    assert SecondaryVertexTagInfo().n_vertices == 0


def test_collection_labels():
    infos = TagInfoCollection()
    ip = TrackIPTagInfo()
    sv = SecondaryVertexTagInfo()
    infos.add("impactParameterTagInfos", ip)
    infos.add("secondaryVertex", sv)
    assert len(infos) == 2
    assert infos.labels == ["impactParameter", "secondaryVertex"]
    assert infos.get("impactParameter") is ip
    assert infos.get("impactParameterTagInfos") is ip
    assert infos.get("secondaryVertexTagInfos") is sv
    assert infos.get("softMuon") is None
    assert list(infos) == [("impactParameter", ip), ("secondaryVertex", sv)]


def test_duplicate_label():
    infos = TagInfoCollection()
    first, second = TrackIPTagInfo(), TrackIPTagInfo()
    infos.add("impactParameter", first)
    infos.add("impactParameterTagInfos", second)
    assert len(infos) == 2
    assert infos.get("impactParameter") is first


def test_collection_types():
    infos = TagInfoCollection()
    adaptive = AdaptiveIPTagInfo()
    plain = TrackIPTagInfo()
    infos.add("adaptiveIP", adaptive)
    infos.add("impactParameter", plain)
    # without label only the exact type matches
    assert infos.of_type(TrackIPTagInfo) is plain
    assert infos.first_of_type(AdaptiveIPTagInfo) is adaptive
    assert infos.of_type(SecondaryVertexTagInfo) is None
    # with a label subclasses match too
    assert infos.of_type(TrackIPTagInfo, "adaptiveIPTagInfos") is adaptive
    assert infos.of_type(SecondaryVertexTagInfo, "adaptiveIP") is None
    assert infos.of_type(TrackIPTagInfo, "missing") is None


def test_collection_copy():
    infos = TagInfoCollection()
    infos.add("impactParameter", TrackIPTagInfo())
    other = copy.copy(infos)
    other.add("secondaryVertex", SecondaryVertexTagInfo(tracks=RefVector()))
    assert len(infos) == 1
    assert infos.get("secondaryVertex") is None
    assert other.get("impactParameter") is infos.get("impactParameter")


def test_custom_suffix(monkeypatch):
    monkeypatch.setattr(config.get_settings(), "tag_info_suffix", "Infos")
    infos = TagInfoCollection()
    info = TrackIPTagInfo()
    infos.add("impactParameterInfos", info)
    assert infos.labels == ["impactParameter"]
    assert infos.get("impactParameterTagInfos") is None
    assert infos.get("impactParameter") is info
