"""Jet energy correction factors

A `JetCorrFactors` set holds one multiplicative factor per correction level,
applied in ascending order as in the factorized approach of the JEC TWiki_:

=====  =========  ===========================  ===================
level  step name  correction                   flavour dependent
=====  =========  ===========================  ===================
0      ``raw``    none (alias ``uncorrected``)  no
1      ``off``    offset (pile-up, noise)      no
2      ``rel``    relative (eta uniformity)    no
3      ``abs``    absolute (pt response)       no
4      ``emf``    electromagnetic fraction     no
5      ``had``    hadron level                 yes
6      ``ue``     underlying event             yes
7      ``part``   parton level                 yes
=====  =========  ===========================  ===================

Flavour dependent levels hold one factor per flavour hypothesis (``glu``,
``uds``, ``c``, ``b``). Steps can also be given as ``L1`` ... ``L7`` or, for the
flavour dependent levels, as ``had:b``.

.. _TWiki: https://twiki.cern.ch/twiki/bin/view/CMS/JetEnergyScale
"""
import enum
import json
import re
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple

from patobjects.exceptions import UnknownCorrectionStep

FLAVOURS = ("glu", "uds", "c", "b")


class CorrLevel(enum.IntEnum):
    RAW = 0
    OFF = 1
    REL = 2
    ABS = 3
    EMF = 4
    HAD = 5
    UE = 6
    PART = 7

    @property
    def key(self) -> str:
        return self.name.lower()

    @property
    def flavour_dependent(self) -> bool:
        return self >= CorrLevel.HAD


_levelre = re.compile(r"^L([1-7])")
_aliases = {"uncorrected": CorrLevel.RAW}


def parse_level(name: str) -> CorrLevel:
    """Translate a step name (``abs``, ``L3``, ``L3Absolute``, ...) to a `CorrLevel`"""
    key = name.strip()
    match = _levelre.match(key)
    if match:
        return CorrLevel(int(match.group(1)))
    key = key.lower()
    if key in _aliases:
        return _aliases[key]
    try:
        return CorrLevel[key.upper()]
    except KeyError:
        raise UnknownCorrectionStep("Unknown jet correction step: %r" % name)


class CorrStep(NamedTuple):
    """A correction level together with the flavour it was evaluated for"""

    level: CorrLevel
    flavour: str = ""

    @property
    def name(self) -> str:
        return self.level.key

    def __str__(self):
        if self.flavour:
            return "%s:%s" % (self.name, self.flavour)
        return self.name


RAW = CorrStep(CorrLevel.RAW)


@dataclass
class JetCorrFactors:
    """One set of jet energy correction factors

    Parameters
    ----------
        label : str
            Name of this set, used to select it among several sets on a jet
        flavour : str
            Flavour hypothesis used for the flavour dependent levels when a
            step is requested without a flavour
        factors : dict
            Step name to factor, for the flavour independent levels
        flavour_factors : dict
            Step name to a dictionary of flavour to factor, for the flavour
            dependent levels
    """

    label: str = ""
    flavour: str = "glu"
    factors: Dict[str, float] = field(default_factory=dict)
    flavour_factors: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def __post_init__(self):
        if self.flavour not in FLAVOURS:
            raise ValueError(
                "Flavour %r of correction set %r is not one of %s"
                % (self.flavour, self.label, ", ".join(FLAVOURS))
            )
        factors = {}
        for name, value in self.factors.items():
            level = parse_level(name)
            if level.flavour_dependent or level == CorrLevel.RAW:
                raise ValueError("%r is not a flavour independent correction" % name)
            factors[level.key] = float(value)
        self.factors = factors
        flavour_factors = {}
        for name, values in self.flavour_factors.items():
            level = parse_level(name)
            if not level.flavour_dependent:
                raise ValueError("%r is not a flavour dependent correction" % name)
            unknown = set(values) - set(FLAVOURS)
            if unknown:
                raise ValueError(
                    "Unknown flavours for correction %r: %s"
                    % (name, ", ".join(sorted(unknown)))
                )
            flavour_factors[level.key] = {k: float(v) for k, v in values.items()}
        self.flavour_factors = flavour_factors

    @classmethod
    def from_dict(cls, info: dict) -> "JetCorrFactors":
        """Build a set from its dictionary (e.g. JSON) representation"""
        allowed = {"label", "flavour", "factors", "flavour_factors"}
        unknown = set(info) - allowed
        if unknown:
            raise ValueError(
                "Unknown keys in correction set: %s" % ", ".join(sorted(unknown))
            )
        return cls(**info)

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "flavour": self.flavour,
            "factors": dict(self.factors),
            "flavour_factors": {k: dict(v) for k, v in self.flavour_factors.items()},
        }

    @property
    def levels(self) -> List[CorrLevel]:
        """The levels defined in this set, in ascending order"""
        keys = set(self.factors) | set(self.flavour_factors)
        return [CorrLevel.RAW] + [lvl for lvl in CorrLevel if lvl.key in keys]

    def _parse_step(self, step, flavour: str = "") -> CorrStep:
        if isinstance(step, CorrStep):
            step, flavour = step.name, flavour or step.flavour
        if ":" in step:
            step, _, stepflavour = step.partition(":")
            flavour = flavour or stepflavour
        level = parse_level(step)
        if level == CorrLevel.RAW:
            return RAW
        if not level.flavour_dependent:
            return CorrStep(level)
        return CorrStep(level, flavour or self.flavour)

    def corr_step(self, step, flavour: str = "") -> CorrStep:
        """Resolve a step name and flavour to a `CorrStep` defined in this set

        The flavour is ignored for flavour independent levels and defaults to
        the flavour of this set for the flavour dependent ones.
        """
        out = self._parse_step(step, flavour)
        if out.level == CorrLevel.RAW:
            return out
        if not out.level.flavour_dependent:
            if out.level.key not in self.factors:
                raise UnknownCorrectionStep(
                    "Correction step %r is not available in set %r"
                    % (out.level.key, self.label)
                )
        elif out.flavour not in self.flavour_factors.get(out.level.key, {}):
            raise UnknownCorrectionStep(
                "Correction step %r for flavour %r is not available in set %r"
                % (out.level.key, out.flavour, self.label)
            )
        return out

    def _cumulative(self, step: CorrStep) -> float:
        out = 1.0
        for level in CorrLevel:
            if level > step.level:
                break
            if level.flavour_dependent:
                out *= self.flavour_factors.get(level.key, {}).get(step.flavour, 1.0)
            else:
                out *= self.factors.get(level.key, 1.0)
        return out

    def correction(self, target, start=RAW) -> float:
        """Total factor to go from ``start`` to ``target``

        Both are `CorrStep` or step names. Only ``target`` must be defined in
        this set; ``start`` is usually the step a jet was corrected to with
        another set. Levels this set does not define contribute a factor of one.
        """
        target = self.corr_step(target)
        start = self._parse_step(start)
        return self._cumulative(target) / self._cumulative(start)


def load_corr_factors(filename) -> List[JetCorrFactors]:
    """Read correction sets from a JSON file holding one set or a list of sets"""
    with open(filename) as fin:
        info = json.load(fin)
    if isinstance(info, dict):
        info = [info]
    return [JetCorrFactors.from_dict(entry) for entry in info]


__all__ = [
    "FLAVOURS",
    "CorrLevel",
    "CorrStep",
    "RAW",
    "JetCorrFactors",
    "parse_level",
    "load_corr_factors",
]
