class ClusterCheckError(Exception):
    """Base class for all errors raised by clustercheck."""
    pass
