"""References into the products of an event

An `EventContent` owns the products (collections of reco objects, towers,
tracks, ...) of one event under string labels. `Ref` and `RefVector` point into
those products by label and index. They only hold a weak reference to the
event content and never keep products alive: once a product is discarded, or
the content itself is gone, resolving the reference raises
`ReferenceUnavailable`.

When pickled, references keep their label and indices but drop the event
content; `EventContent.attach` binds them to a (new) content again.
"""
import logging
import weakref

import numpy
import awkward

from patobjects.exceptions import IndexOutOfRange, ReferenceUnavailable

logger = logging.getLogger(__name__)


class EventContent:
    """The products of one event, keyed by label"""

    def __init__(self):
        self._products = {}

    def __contains__(self, label):
        return label in self._products

    def __repr__(self):
        return "EventContent(%s)" % ", ".join(sorted(self._products))

    def put(self, label, product):
        """Store a product (list or awkward array) under ``label``"""
        if label in self._products:
            raise ValueError("A product with label %r is already present" % label)
        self._products[label] = product
        return label

    def find(self, label):
        """Return the product stored under ``label``, or None"""
        return self._products.get(label)

    def discard(self, label):
        """Drop a product; references into it become unavailable"""
        if self._products.pop(label, None) is not None:
            logger.debug("Discarded product %r", label)

    def ref(self, label, index):
        """A reference to element ``index`` of product ``label``"""
        _check_index(index, len(self._products[label]))
        return Ref(label, index, self)

    def ref_vector(self, label, indices=None):
        """References to several elements of product ``label`` (all of them by default)"""
        size = len(self._products[label])
        if indices is None:
            indices = numpy.arange(size)
        indices = numpy.asarray(indices, dtype=numpy.int64)
        for index in indices:
            _check_index(index, size)
        return RefVector(label, indices, self)

    def attach(self, *refs):
        """Make detached references resolve through this content"""
        for ref in refs:
            if ref is not None and not ref.is_null():
                ref._getter = weakref.ref(self)


def _check_index(index, size):
    if not 0 <= index < size:
        raise IndexOutOfRange("Index %d out of range for %d elements" % (index, size))


class _ProductPointer:
    def __init__(self, product, getter):
        self.product = product
        self._getter = weakref.ref(getter) if getter is not None else None

    def __getstate__(self):
        state = dict(self.__dict__)
        state["_getter"] = None
        return state

    def __copy__(self):
        out = self.__class__.__new__(self.__class__)
        out.__dict__.update(self.__dict__)
        return out

    def is_null(self):
        """True if this reference was never set"""
        return self.product is None

    def is_available(self):
        """True if the referenced product can be found"""
        content = self._getter() if self._getter is not None else None
        return content is not None and self.product in content

    def _product(self):
        content = self._getter() if self._getter is not None else None
        if content is None or self.product not in content:
            logger.debug("Product %r cannot be resolved", self.product)
            raise ReferenceUnavailable(
                "The product %r this reference points to is not present any more "
                "in the event, hence the referenced object cannot be accessed"
                % self.product
            )
        return content.find(self.product)


class Ref(_ProductPointer):
    """A reference to one element of a product

    A default-constructed `Ref` is null.
    """

    def __init__(self, product=None, index=None, getter=None):
        super().__init__(product, getter)
        self.index = index

    def __repr__(self):
        if self.is_null():
            return "Ref(null)"
        return "Ref(%r, %d)" % (self.product, self.index)

    def __eq__(self, other):
        if not isinstance(other, Ref):
            return NotImplemented
        return (self.product, self.index) == (other.product, other.index)

    def __hash__(self):
        return hash((self.product, self.index))

    def get(self):
        """The referenced object; None for a null reference"""
        if self.is_null():
            return None
        return self._product()[self.index]


class RefVector(_ProductPointer):
    """References to several elements of one product

    Indexing and iteration resolve the references.
    """

    def __init__(self, product=None, indices=(), getter=None):
        super().__init__(product, getter)
        self.indices = numpy.asarray(indices, dtype=numpy.int64)

    def __repr__(self):
        return "RefVector(%r, %s)" % (self.product, self.indices.tolist())

    def __len__(self):
        return len(self.indices)

    def __getitem__(self, i):
        _check_index(i, len(self))
        return self._product()[int(self.indices[i])]

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def ref(self, i):
        """The `Ref` to the i-th element"""
        _check_index(i, len(self))
        out = Ref(self.product, int(self.indices[i]))
        out._getter = self._getter
        return out

    def resolve(self):
        """All referenced elements, as an awkward array if the product is one"""
        if len(self) == 0:
            return []
        product = self._product()
        if isinstance(product, awkward.Array):
            return product[self.indices]
        return [product[int(i)] for i in self.indices]


__all__ = ["EventContent", "Ref", "RefVector"]
