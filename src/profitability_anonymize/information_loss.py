"""
Entropy-based information loss of equivalence classes.

The loss of a class is derived from the domain shares of its generalized
values. For every hierarchy dimension the class contributes the logarithm of
the share of its value at the level chosen by the transformation; every
microaggregated attribute contributes the logarithm of the share estimated by
its microaggregation function. The contributions are summed and normalized by
the sum obtained when every value is as specific as it can be:

    loss = 1 - sum(log10(share_i)) / sum(log10(1 / domain_size_i))

A class in which every dimension is fully generalized (all shares 1) has a
loss of 1, a class in which nothing is generalized has a loss of 0. Because
shares grow with the generalization level, the loss is monotonically
non-decreasing in the level of every dimension, which the external
branch-and-bound search relies on when it prunes with loss bounds.

References
----------
Z. Wan, Y. Vorobeychik, W. Xia, E. W. Clayton, M. Kantarcioglu, R. Ganta,
R. Heatherly, B. A. Malin. "A Game Theoretic Framework for Analyzing
Re-Identification Risk." PLOS ONE 10(3), 2015.
"""

import math
from typing import Optional, Sequence

from profitability_anonymize.domain_shares import DomainShare
from profitability_anonymize.exceptions import ConfigurationError
from profitability_anonymize.microaggregation import (
    MicroaggregationFunction,
    get_microaggregation_domain_sizes,
)
from profitability_anonymize.structures import EquivalenceClass, Transformation


def _hierarchy_log_share(
    transformation: Transformation, entry: EquivalenceClass, shares: Sequence[DomainShare]
) -> float:
    generalization = transformation.generalization
    key = entry.key
    log_share = 0.0
    for dimension, share in enumerate(shares):
        log_share += math.log10(share.share(key[dimension], generalization[dimension]))
    return log_share


def compute_maximal_entropy_information_loss(
    shares: Sequence[DomainShare],
    microaggregation_domain_sizes: Optional[Sequence[int]] = None,
) -> float:
    """
    Compute the normalization constant of the entropy-based information loss.

    Parameters
    ----------
    shares : Sequence[DomainShare]
        Domain shares of each hierarchy dimension.
    microaggregation_domain_sizes : Sequence[int], optional
        Domain size of each microaggregated attribute.

    Returns
    -------
    float
        ``log10(1 / prod(domain sizes))``, i.e. the (non-positive) log-share
        sum of a class whose values are all at their most specific share.
    """
    result = 0.0
    for share in shares:
        result -= math.log10(share.domain_size)
    if microaggregation_domain_sizes is not None:
        for size in microaggregation_domain_sizes:
            result -= math.log10(size)
    return result


def compute_entropy_information_loss(
    transformation: Transformation,
    entry: EquivalenceClass,
    shares: Sequence[DomainShare],
    microaggregation_functions: Optional[Sequence[MicroaggregationFunction]],
    microaggregation_start_index: int,
    max_il: float,
) -> float:
    """
    Compute the entropy-based information loss of an equivalence class.

    Parameters
    ----------
    transformation : Transformation
        The transformation that produced the class.
    entry : EquivalenceClass
        The equivalence class; ``entry.key[d]`` is the generalized value of
        hierarchy dimension ``d``.
    shares : Sequence[DomainShare]
        Domain shares of each hierarchy dimension.
    microaggregation_functions : Sequence[MicroaggregationFunction] or None
        Microaggregation function of each microaggregated attribute, or None if
        no attribute is microaggregated.
    microaggregation_start_index : int
        Offset of the first microaggregated attribute in ``entry.distributions``.
    max_il : float
        Normalization constant from compute_maximal_entropy_information_loss,
        computed once per run.

    Returns
    -------
    float
        The information loss in [0, 1].
    """
    log_share = _hierarchy_log_share(transformation, entry, shares)
    if microaggregation_functions:
        distributions = entry.distributions
        for index, function in enumerate(microaggregation_functions):
            values = distributions[microaggregation_start_index + index]
            log_share += math.log10(function.information_loss(values))
    if max_il == 0.0:
        # Every domain has a single value, nothing can be lost
        return 0.0
    loss = 1.0 - log_share / max_il
    return min(1.0, max(0.0, loss))


def compute_entropy_information_loss_lower_bound(
    transformation: Transformation,
    entry: EquivalenceClass,
    shares: Sequence[DomainShare],
    microaggregation_domain_sizes: Optional[Sequence[int]],
    max_il: float,
) -> float:
    """
    Compute a lower bound of the entropy-based information loss of a class.

    Microaggregated attributes are assumed to be as specific as possible
    (share ``1/domain_size``), so the result never exceeds the loss computed
    by compute_entropy_information_loss for any grouping of the same records.

    Parameters
    ----------
    transformation : Transformation
        The transformation that produced the class.
    entry : EquivalenceClass
        The equivalence class.
    shares : Sequence[DomainShare]
        Domain shares of each hierarchy dimension.
    microaggregation_domain_sizes : Sequence[int] or None
        Domain size of each microaggregated attribute.
    max_il : float
        Normalization constant from compute_maximal_entropy_information_loss.

    Returns
    -------
    float
        The lower bound in [0, 1].
    """
    log_share = _hierarchy_log_share(transformation, entry, shares)
    if microaggregation_domain_sizes is not None:
        for size in microaggregation_domain_sizes:
            log_share -= math.log10(size)
    if max_il == 0.0:
        return 0.0
    loss = 1.0 - log_share / max_il
    return min(1.0, max(0.0, loss))


class DomainLossModel:
    """
    Entropy-based information loss for one run.

    Bundles the domain shares and microaggregation descriptors of a dataset
    with the normalization constant computed once from them. Immutable and
    safe to share between threads.

    Parameters
    ----------
    shares : Sequence[DomainShare]
        Domain shares of each hierarchy dimension.
    microaggregation_functions : Sequence[MicroaggregationFunction], optional
        Microaggregation function of each microaggregated attribute.
    microaggregation_start_index : int, optional
        Offset of the first microaggregated attribute in
        ``EquivalenceClass.distributions``, by default 0.

    Raises
    ------
    ConfigurationError
        If there are no domain shares or the start index is negative.
    """

    def __init__(
        self,
        shares: Sequence[DomainShare],
        microaggregation_functions: Optional[Sequence[MicroaggregationFunction]] = None,
        microaggregation_start_index: int = 0,
    ) -> None:
        if len(shares) == 0:
            raise ConfigurationError("At least one domain share is required")
        if microaggregation_start_index < 0:
            raise ConfigurationError(
                f"microaggregation_start_index ({microaggregation_start_index}) must be >= 0"
            )
        self.shares = tuple(shares)
        self.microaggregation_functions = (
            tuple(microaggregation_functions) if microaggregation_functions else ()
        )
        self.microaggregation_start_index = microaggregation_start_index
        self.microaggregation_domain_sizes = get_microaggregation_domain_sizes(
            self.microaggregation_functions
        )
        self.max_il = compute_maximal_entropy_information_loss(
            self.shares, self.microaggregation_domain_sizes
        )

    @property
    def num_dimensions(self) -> int:
        return len(self.shares)

    def information_loss(self, transformation: Transformation, entry: EquivalenceClass) -> float:
        return compute_entropy_information_loss(
            transformation,
            entry,
            self.shares,
            self.microaggregation_functions,
            self.microaggregation_start_index,
            self.max_il,
        )

    def information_loss_lower_bound(
        self, transformation: Transformation, entry: EquivalenceClass
    ) -> float:
        return compute_entropy_information_loss_lower_bound(
            transformation, entry, self.shares, self.microaggregation_domain_sizes, self.max_il
        )

    def __repr__(self) -> str:
        return (
            f"DomainLossModel(num_dimensions={self.num_dimensions}, "
            f"num_microaggregated={len(self.microaggregation_functions)}, max_il={self.max_il})"
        )
