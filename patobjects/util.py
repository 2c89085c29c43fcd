"""Utility functions

"""
import lz4.frame
import cloudpickle


def load(filename):
    """Load a pickled PAT object (or collection thereof) from disk

    References inside the loaded objects are detached from any event content;
    use `EventContent.attach` to make them resolvable again.
    """
    with lz4.frame.open(filename) as fin:
        output = cloudpickle.load(fin)
    return output


def save(output, filename):
    """Save a PAT object or collection thereof to disk

    This function can accept any picklable object.  Suggested suffix: ``.pat``
    """
    with lz4.frame.open(filename, "wb") as fout:
        thepickle = cloudpickle.dumps(output)
        fout.write(thepickle)
