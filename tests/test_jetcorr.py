import json

import pytest

from patobjects.exceptions import UnknownCorrectionStep
from patobjects.jetcorr import (
    RAW,
    CorrLevel,
    CorrStep,
    JetCorrFactors,
    load_corr_factors,
    parse_level,
)


@pytest.fixture
def factors():
    return JetCorrFactors(
        "default",
        factors={"L1Offset": 0.9, "rel": 1.1, "abs": 1.2},
        flavour_factors={
            "had": {"glu": 0.98, "b": 1.05},
            "L7Parton": {"b": 1.02},
        },
    )


def test_parse_level():
    assert parse_level("L3Absolute") == CorrLevel.ABS
    assert parse_level("abs") == CorrLevel.ABS
    assert parse_level("REL") == CorrLevel.REL
    assert parse_level("uncorrected") == CorrLevel.RAW
    assert parse_level("raw") == CorrLevel.RAW
    assert parse_level("L5Flavor") == CorrLevel.HAD
    with pytest.raises(UnknownCorrectionStep):
        parse_level("L9")
    with pytest.raises(UnknownCorrectionStep):
        parse_level("bogus")


def test_levels():
    assert CorrLevel.PART.key == "part"
    assert CorrLevel.UE.flavour_dependent
    assert not CorrLevel.EMF.flavour_dependent
    assert str(CorrStep(CorrLevel.HAD, "b")) == "had:b"
    assert str(RAW) == "raw"


def test_validation():
    with pytest.raises(ValueError):
        JetCorrFactors(flavour="top")
    with pytest.raises(ValueError):
        JetCorrFactors(factors={"had": 1.1})
    with pytest.raises(ValueError):
        JetCorrFactors(flavour_factors={"abs": {"b": 1.1}})
    with pytest.raises(ValueError):
        JetCorrFactors(flavour_factors={"had": {"top": 1.1}})
    with pytest.raises(UnknownCorrectionStep):
        JetCorrFactors(factors={"bogus": 1.1})


def test_normalized_keys(factors):
    assert factors.factors == {"off": 0.9, "rel": 1.1, "abs": 1.2}
    assert set(factors.flavour_factors) == {"had", "part"}
    assert factors.levels == [
        CorrLevel.RAW,
        CorrLevel.OFF,
        CorrLevel.REL,
        CorrLevel.ABS,
        CorrLevel.HAD,
        CorrLevel.PART,
    ]


def test_corr_step(factors):
    assert factors.corr_step("L3") == CorrStep(CorrLevel.ABS)
    # flavour is ignored below the flavour dependent levels
    assert factors.corr_step("abs", "b") == CorrStep(CorrLevel.ABS)
    assert factors.corr_step("had") == CorrStep(CorrLevel.HAD, "glu")
    assert factors.corr_step("had", "b") == CorrStep(CorrLevel.HAD, "b")
    assert factors.corr_step("part:b") == CorrStep(CorrLevel.PART, "b")
    assert factors.corr_step(CorrStep(CorrLevel.HAD, "b")) == CorrStep(CorrLevel.HAD, "b")
    assert factors.corr_step("uncorrected") == RAW
    with pytest.raises(UnknownCorrectionStep):
        factors.corr_step("emf")
    with pytest.raises(UnknownCorrectionStep):
        factors.corr_step("part")
    with pytest.raises(UnknownCorrectionStep):
        factors.corr_step("had", "c")


def test_correction(factors):
    assert factors.correction("raw") == 1.0
    assert factors.correction("off") == pytest.approx(0.9)
    assert factors.correction("abs") == pytest.approx(0.9 * 1.1 * 1.2)
    assert factors.correction("raw", "abs") == pytest.approx(1 / (0.9 * 1.1 * 1.2))
    assert factors.correction("had:b", "abs") == pytest.approx(1.05)
    # the undefined ue level counts as one
    assert factors.correction("part:b") == pytest.approx(0.9 * 1.1 * 1.2 * 1.05 * 1.02)
    assert factors.correction("abs", "abs") == pytest.approx(1.0)


def test_partial_set():
    factors = JetCorrFactors("abs only", factors={"abs": 1.2})
    assert factors.correction("abs") == pytest.approx(1.2)
    with pytest.raises(UnknownCorrectionStep):
        factors.correction("rel")


def test_start_outside_set():
    factors = JetCorrFactors("offset only", factors={"off": 0.8})
    # the start step does not have to be defined in this set
    assert factors.correction("raw", "abs") == pytest.approx(1 / 0.8)
    assert factors.correction("off", "L3Absolute") == pytest.approx(1.0)
    assert factors.correction("raw", "had:b") == pytest.approx(1 / 0.8)
    with pytest.raises(UnknownCorrectionStep):
        factors.correction("abs", "off")


def test_dict_roundtrip(factors):
    info = factors.to_dict()
    assert info["factors"]["off"] == 0.9
    assert JetCorrFactors.from_dict(info) == factors
    info["offset"] = 1.0
    with pytest.raises(ValueError):
        JetCorrFactors.from_dict(info)


def test_load_corr_factors(tmp_path, factors):
    path = tmp_path / "jec.json"
    path.write_text(json.dumps([factors.to_dict(), {"label": "jesUp", "factors": {"abs": 1.3}}]))
    sets = load_corr_factors(str(path))
    assert [s.label for s in sets] == ["default", "jesUp"]
    assert sets[0] == factors
    assert sets[1].correction("abs") == pytest.approx(1.3)

    path.write_text(json.dumps({"label": "single", "flavour": "b"}))
    (single,) = load_corr_factors(str(path))
    assert single.flavour == "b"
