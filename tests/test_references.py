import gc

import awkward as ak
import cloudpickle
import pytest

from patobjects.exceptions import IndexOutOfRange, ReferenceUnavailable
from patobjects.methods import candidate
from patobjects.references import EventContent, Ref, RefVector


def test_event_content(content):
    assert "towers" in content
    assert "muons" not in content
    assert content.find("muons") is None
    with pytest.raises(ValueError):
        content.put("towers", [])
    content.discard("towers")
    assert "towers" not in content
    # discarding twice is harmless
    content.discard("towers")


def test_null_ref():
    ref = Ref()
    assert ref.is_null()
    assert not ref.is_available()
    assert ref.get() is None
    assert len(RefVector()) == 0
    assert RefVector().resolve() == []


def test_ref(content):
    ref = content.ref("genParticles", 1)
    assert not ref.is_null()
    assert ref.is_available()
    particle = ref.get()
    assert isinstance(particle, candidate.GenParticle)
    assert particle.pdgId == 21
    assert ref == Ref("genParticles", 1)
    assert ref != content.ref("genParticles", 0)
    assert len({ref, Ref("genParticles", 1)}) == 1
    with pytest.raises(IndexOutOfRange):
        content.ref("genParticles", 2)


def test_ref_to_list_product():
    content = EventContent()
    content.put("labels", ["a", "b", "c"])
    assert content.ref("labels", 2).get() == "c"
    refs = content.ref_vector("labels", [2, 0])
    assert refs.resolve() == ["c", "a"]
    assert list(refs) == ["c", "a"]


def test_ref_vector(content):
    refs = content.ref_vector("tracks", [2, 0])
    assert len(refs) == 2
    assert refs[0].pt == pytest.approx(3.0)
    assert refs.ref(1) == Ref("tracks", 0)
    assert refs.ref(1).get().dxy == pytest.approx(0.01)
    resolved = refs.resolve()
    assert isinstance(resolved, ak.Array)
    assert ak.to_list(resolved.pt) == [3.0, 12.0]
    assert [t.charge for t in refs] == [1, 1]
    with pytest.raises(IndexOutOfRange):
        refs[2]
    with pytest.raises(IndexOutOfRange):
        content.ref_vector("tracks", [0, 3])
    assert len(content.ref_vector("tracks")) == 3


def test_discarded_product(content):
    ref = content.ref("tracks", 0)
    refs = content.ref_vector("tracks")
    content.discard("tracks")
    assert not ref.is_null()
    assert not ref.is_available()
    with pytest.raises(ReferenceUnavailable):
        ref.get()
    with pytest.raises(ReferenceUnavailable):
        refs.resolve()
    # the length is known without the product
    assert len(refs) == 3


def test_content_gone():
    content = EventContent()
    content.put("labels", ["a"])
    ref = content.ref("labels", 0)
    del content
    gc.collect()
    with pytest.raises(ReferenceUnavailable):
        ref.get()


def test_pickle_and_attach(content):
    ref = content.ref("genParticles", 0)
    refs = content.ref_vector("towers", [1, 3])
    ref2, refs2 = cloudpickle.loads(cloudpickle.dumps((ref, refs)))
    assert ref2 == ref
    assert not ref2.is_available()
    with pytest.raises(ReferenceUnavailable):
        ref2.get()
    content.attach(ref2, refs2, Ref())
    assert ref2.get().pdgId == 5
    assert ak.to_list(refs2.resolve().energy) == [40.0, 30.0]
