"""b-tagging information attached to jets

Tag infos are the algorithm specific inputs of the b-tagging discriminators.
A jet owns its tag infos in a `TagInfoCollection`, which keeps them in
insertion order together with their labels and finds them by label or by type.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Type

import numpy

from patobjects import config
from patobjects.references import RefVector

logger = logging.getLogger(__name__)


def _floats():
    return numpy.zeros(0, dtype=numpy.float32)


@dataclass(eq=False)
class BaseTagInfo:
    """Common part of all tag infos: the tracks the algorithm looked at"""

    tracks: RefVector = field(default_factory=RefVector)


@dataclass(eq=False)
class TrackIPTagInfo(BaseTagInfo):
    """Impact parameter significances and probabilities of the selected tracks"""

    ip2d_significance: numpy.ndarray = field(default_factory=_floats)
    ip3d_significance: numpy.ndarray = field(default_factory=_floats)
    probability_2d: numpy.ndarray = field(default_factory=_floats)
    probability_3d: numpy.ndarray = field(default_factory=_floats)

    def sorted_indices(self, ip="3d"):
        """Track indices ordered by decreasing 2d or 3d impact parameter significance"""
        significance = self.ip3d_significance if ip == "3d" else self.ip2d_significance
        return numpy.argsort(-numpy.asarray(significance), kind="stable")


@dataclass(eq=False)
class TrackCountingTagInfo(BaseTagInfo):
    significance: numpy.ndarray = field(default_factory=_floats)

    def discriminator(self, n: int) -> float:
        """Significance of the n-th (1-based) most significant track, -100 if there are fewer"""
        ordered = numpy.sort(numpy.asarray(self.significance))[::-1]
        if not 0 < n <= len(ordered):
            return -100.0
        return float(ordered[n - 1])


@dataclass(eq=False)
class TrackProbabilityTagInfo(BaseTagInfo):
    probability_2d: float = 1.0
    probability_3d: float = 1.0


@dataclass
class SoftLeptonProperties:
    pt_rel: float = 0.0
    sip3d: float = 0.0
    delta_r: float = 0.0
    ratio_rel: float = 0.0


@dataclass(eq=False)
class SoftLeptonTagInfo(BaseTagInfo):
    """Non-isolated leptons found inside the jet"""

    leptons: RefVector = field(default_factory=RefVector)
    properties: List[SoftLeptonProperties] = field(default_factory=list)

    @property
    def n_leptons(self) -> int:
        return len(self.leptons)


@dataclass(eq=False)
class SecondaryVertexTagInfo(BaseTagInfo):
    """Displaced vertices reconstructed from the jet tracks"""

    vertex_mass: numpy.ndarray = field(default_factory=_floats)
    flight_distance: numpy.ndarray = field(default_factory=_floats)
    flight_distance_error: numpy.ndarray = field(default_factory=_floats)

    @property
    def n_vertices(self) -> int:
        return len(self.vertex_mass)

    def flight_distance_significance(self, i: int) -> float:
        return float(self.flight_distance[i] / self.flight_distance_error[i])


class TagInfoCollection:
    """Tag infos in insertion order, addressable by label and by type

    Labels are stored without the ``tag_info_suffix`` setting (by default
    ``TagInfos``), and lookups strip it as well, so ``secondaryVertexTagInfos``
    and ``secondaryVertex`` refer to the same entry.
    """

    def __init__(self):
        self._labels: List[str] = []
        self._infos: List[BaseTagInfo] = []
        self._by_label = {}

    def __copy__(self):
        out = TagInfoCollection()
        out._labels = list(self._labels)
        out._infos = list(self._infos)
        out._by_label = dict(self._by_label)
        return out

    def __len__(self):
        return len(self._infos)

    def __iter__(self) -> Iterator[Tuple[str, BaseTagInfo]]:
        return iter(zip(self._labels, self._infos))

    @staticmethod
    def normalize(label: str) -> str:
        suffix = config.get_settings().tag_info_suffix
        if suffix and label.endswith(suffix):
            return label[: -len(suffix)]
        return label

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def add(self, label: str, info: BaseTagInfo):
        label = self.normalize(label)
        self._by_label.setdefault(label, len(self._infos))
        self._labels.append(label)
        self._infos.append(info)
        logger.debug("Added %s tag info %r", type(info).__name__, label)

    def get(self, label: str) -> Optional[BaseTagInfo]:
        """The tag info stored under ``label``, or None"""
        index = self._by_label.get(self.normalize(label))
        return None if index is None else self._infos[index]

    def first_of_type(self, kind: Type[BaseTagInfo]) -> Optional[BaseTagInfo]:
        """The first tag info whose type is exactly ``kind``, or None

        Subclasses do not match here: an unlabelled request for e.g.
        `TrackIPTagInfo` must not pick a specialised variant that happens to be
        stored first. A labelled lookup (`of_type`) names the entry, so there any
        instance of ``kind`` is accepted.
        """
        for info in self._infos:
            if type(info) is kind:
                return info
        return None

    def of_type(self, kind: Type[BaseTagInfo], label: str = "") -> Optional[BaseTagInfo]:
        """The tag info under ``label`` if it is a ``kind``; without a label the first ``kind``"""
        if not label:
            return self.first_of_type(kind)
        info = self.get(label)
        return info if isinstance(info, kind) else None


__all__ = [
    "BaseTagInfo",
    "TrackIPTagInfo",
    "TrackCountingTagInfo",
    "TrackProbabilityTagInfo",
    "SoftLeptonProperties",
    "SoftLeptonTagInfo",
    "SecondaryVertexTagInfo",
    "TagInfoCollection",
]
