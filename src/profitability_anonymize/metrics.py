"""
Publisher payout quality metric.

Scores a whole table partition under one transformation by the payout the
publisher forgoes. Suppressed classes forgo the full benefit of their
records; kept classes forgo the difference between the benefit and their
expected payout. The generalization/suppression factor weights the two
against each other:

    suppression_factor = 2 * gs        if gs <= 0.5 else 1
    generalization_factor = 1          if gs <= 0.5 else 2 * (1 - gs)

Besides the real score, the metric reports an optimistic bound in which no
adversary ever succeeds and suppressed classes cost the cheaper of
suppression and generalization. Because payout falls with information loss and
information loss never falls under generalization, the bound of a
transformation never exceeds the real score of any of its specializations,
which the external search uses for pruning.
"""

import logging
from collections import namedtuple
from typing import Iterable, Optional, Sequence

from profitability_anonymize.census import CensusMap
from profitability_anonymize.constants import MAXIMAL_PAYOUT, PUBLISHER_PAYOUT
from profitability_anonymize.criteria import (
    AttackerModel,
    check_gs_factor,
    sample_success_probability,
    subset_success_probability,
)
from profitability_anonymize.domain_shares import DomainShare
from profitability_anonymize.exceptions import ConfigurationError
from profitability_anonymize.information_loss import DomainLossModel
from profitability_anonymize.microaggregation import MicroaggregationFunction
from profitability_anonymize.risk_model import CostBenefitConfiguration, CostBenefitRiskModel
from profitability_anonymize.structures import EquivalenceClass, Transformation

_LOGGER = logging.getLogger(__name__)


class PayoutInformationLoss(
    namedtuple("PayoutInformationLoss", ["real", "bound", "total_payout", "max_payout"])
):
    """
    Score of a transformation under the publisher payout metric.

    Attributes
    ----------
    real : float
        Forgone payout, lower is better.
    bound : float
        Optimistic forgone payout assuming no attack succeeds.
    total_payout : float
        Expected payout of all kept records.
    max_payout : float
        Payout of publishing every record without loss or risk.
    """

    __slots__ = ()

    @property
    def normalized_payout(self) -> float:
        """Total payout as a share of the theoretical maximum."""
        return self.total_payout / self.max_payout if self.max_payout else 0.0

    @property
    def metadata(self) -> dict[str, float]:
        return {PUBLISHER_PAYOUT: self.total_payout, MAXIMAL_PAYOUT: self.max_payout}


ClassInformationLoss = namedtuple("ClassInformationLoss", ["real", "bound"])


def get_suppression_factor(gs_factor: float) -> float:
    return 2.0 * gs_factor if gs_factor <= 0.5 else 1.0


def get_generalization_factor(gs_factor: float) -> float:
    return 1.0 if gs_factor <= 0.5 else 2.0 * (1.0 - gs_factor)


class PublisherPayoutMetric:
    """
    Quality metric measuring the publisher's forgone payout.

    Parameters
    ----------
    cost_benefit_config : CostBenefitConfiguration
        Parameters of the game.
    attacker_model : AttackerModel
        Whether success probabilities follow the prosecutor or the journalist model.
    shares : Sequence[DomainShare]
        Domain shares of each hierarchy dimension.
    num_records : int
        Number of records of the dataset, used for the theoretical maximum.
    gs_factor : float, optional
        Generalization/suppression factor in [0, 1], by default 0.5.
    microaggregation_functions : Sequence[MicroaggregationFunction], optional
        Microaggregation function of each microaggregated attribute.
    microaggregation_start_index : int, optional
        Offset of the first microaggregated attribute in the classes' distributions.
    census_map : CensusMap, optional
        If given, success probabilities are corrected with population group
        sizes. Only supported for the journalist model.
    logger : logging.Logger, optional
        Logger, by default this module's logger.

    Raises
    ------
    ConfigurationError
        For an invalid gs_factor, negative num_records, or a census map that
        does not fit the attacker model or the domain shares.
    """

    def __init__(
        self,
        cost_benefit_config: CostBenefitConfiguration,
        attacker_model: AttackerModel,
        shares: Sequence[DomainShare],
        num_records: int,
        gs_factor: float = 0.5,
        microaggregation_functions: Optional[Sequence[MicroaggregationFunction]] = None,
        microaggregation_start_index: int = 0,
        census_map: Optional[CensusMap] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger if logger is not None else _LOGGER
        self.gs_factor = check_gs_factor(gs_factor)
        if num_records < 0:
            raise ConfigurationError(f"num_records ({num_records}) must be >= 0")
        self.loss_model = DomainLossModel(
            shares, microaggregation_functions, microaggregation_start_index
        )
        if census_map is not None:
            if attacker_model is not AttackerModel.JOURNALIST:
                raise ConfigurationError("Census data is only supported by the journalist model")
            if census_map.num_dimensions != self.loss_model.num_dimensions:
                raise ConfigurationError(
                    f"Census map has {census_map.num_dimensions} dimensions, "
                    f"domain shares have {self.loss_model.num_dimensions}"
                )
        self.cost_benefit_config = cost_benefit_config
        self.attacker_model = attacker_model
        self.census_map = census_map
        self.num_records = num_records
        self.risk_model = CostBenefitRiskModel(cost_benefit_config)
        self.suppression_factor = get_suppression_factor(self.gs_factor)
        self.generalization_factor = get_generalization_factor(self.gs_factor)
        self.max_payout = num_records * cost_benefit_config.publisher_benefit
        self.logger.info(
            "Initialized %s with %d records, gs_factor = %s, census data = %s",
            self,
            num_records,
            self.gs_factor,
            census_map is not None,
        )

    @property
    def is_journalist_attacker_model(self) -> bool:
        return self.attacker_model is AttackerModel.JOURNALIST

    @property
    def is_prosecutor_attacker_model(self) -> bool:
        return self.attacker_model is AttackerModel.PROSECUTOR

    @property
    def max_information_loss(self) -> float:
        return self.max_payout

    @property
    def min_information_loss(self) -> float:
        return 0.0

    def success_probability(self, entry: EquivalenceClass) -> float:
        """
        Return the success probability of an attack on a class.

        Raises
        ------
        InvariantViolation
            If census data is used and the population does not fit the class.
        """
        if self.is_journalist_attacker_model:
            probability = subset_success_probability(entry)
        else:
            probability = sample_success_probability(entry)
        if self.census_map is not None:
            return self.census_map.success_probability(entry, probability)
        return probability

    def _evaluate(
        self, transformation: Transformation, entry: EquivalenceClass
    ) -> tuple[float, float, float]:
        benefit = self.cost_benefit_config.publisher_benefit
        information_loss = self.loss_model.information_loss(transformation, entry)
        real_payout = self.risk_model.get_expected_publisher_payout(
            information_loss, self.success_probability(entry)
        )
        bound_payout = self.risk_model.get_expected_publisher_payout(information_loss, 0.0)
        bound = self.generalization_factor * entry.count * (benefit - bound_payout)
        if entry.is_outlier:
            real = self.suppression_factor * entry.count * benefit
            # Suppressing may be cheaper than any generalization of the class
            bound = min(real, bound)
        else:
            real = self.generalization_factor * entry.count * (benefit - real_payout)
        return real, bound, real_payout

    def compute_information_loss(
        self, transformation: Transformation, entries: Iterable[EquivalenceClass]
    ) -> PayoutInformationLoss:
        """
        Score a whole table partition.

        Parameters
        ----------
        transformation : Transformation
            The transformation that produced the classes.
        entries : Iterable[EquivalenceClass]
            Every class of the partition; classes with ``count == 0`` are skipped.

        Returns
        -------
        PayoutInformationLoss
            Real score, bound and payout metadata.
        """
        real = 0.0
        bound = 0.0
        total_payout = 0.0
        for entry in entries:
            if entry.count > 0:
                entry_real, entry_bound, real_payout = self._evaluate(transformation, entry)
                real += entry_real
                bound += entry_bound
                if not entry.is_outlier:
                    total_payout += entry.count * real_payout
        return PayoutInformationLoss(real, bound, total_payout, self.max_payout)

    def compute_information_loss_for_class(
        self, transformation: Transformation, entry: EquivalenceClass
    ) -> ClassInformationLoss:
        """
        Score a single class, e.g. for local recoding.

        A class with ``count == 0`` exists only in the population and scores 0.
        """
        if entry.count == 0:
            return ClassInformationLoss(0.0, 0.0)
        real, bound, _ = self._evaluate(transformation, entry)
        return ClassInformationLoss(real, bound)

    def compute_lower_bound(
        self, transformation: Transformation, entries: Iterable[EquivalenceClass]
    ) -> float:
        """
        Compute the bound of a partition without looking at attribute values.

        Microaggregated attributes are assumed to lose nothing, so the result
        is at most the bound of compute_information_loss.
        """
        benefit = self.cost_benefit_config.publisher_benefit
        bound = 0.0
        for entry in entries:
            if entry.count > 0:
                information_loss = self.loss_model.information_loss_lower_bound(
                    transformation, entry
                )
                bound_payout = self.risk_model.get_expected_publisher_payout(information_loss, 0.0)
                entry_bound = self.generalization_factor * entry.count * (benefit - bound_payout)
                if entry.is_outlier:
                    entry_bound = min(self.suppression_factor * entry.count * benefit, entry_bound)
                bound += entry_bound
        return bound

    def __str__(self) -> str:
        model = "Journalist" if self.is_journalist_attacker_model else "Prosecutor"
        return f"PublisherBenefit ({model}, Benefit={self.cost_benefit_config.publisher_benefit})"
