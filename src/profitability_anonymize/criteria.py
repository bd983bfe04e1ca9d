"""
Profitability privacy models.

A profitability model keeps an equivalence class if publishing its records
pays off for the publisher in the cost-benefit game against a rational
adversary (see risk_model). The models differ in the adversary's background
knowledge, which determines the success probability of an attack:

- Prosecutor: the adversary knows that the target is in the released sample,
  so the success probability is ``1 / count``.
- Journalist: the adversary only knows that the target is in a larger
  population. The success probability is ``1 / pcount`` where the class's size
  within the research subset is known, ``1 / count`` otherwise, or derived
  from population group sizes when census data is used.

Models are immutable once built. The external search may evaluate them from
many workers at the same time.
"""

import logging
import math
import numbers
from abc import ABCMeta, abstractmethod
from concurrent.futures import Executor
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

from profitability_anonymize.census import CensusMap
from profitability_anonymize.constants import DEFAULT_GS_FACTOR
from profitability_anonymize.domain_shares import DomainShare
from profitability_anonymize.exceptions import ConfigurationError
from profitability_anonymize.futures import collect_results, make_future
from profitability_anonymize.information_loss import DomainLossModel
from profitability_anonymize.microaggregation import MicroaggregationFunction
from profitability_anonymize.risk_model import CostBenefitConfiguration, CostBenefitRiskModel
from profitability_anonymize.structures import DataSubset, EquivalenceClass, Transformation
from profitability_anonymize.utils import debug_logging_enabled

_LOGGER = logging.getLogger(__name__)

AttackerModel = Enum("AttackerModel", ["PROSECUTOR", "JOURNALIST"])

DEFAULT_CLASSIFICATION_CHUNK_SIZE = 1024


def check_gs_factor(gs_factor: float) -> float:
    """
    Validate a generalization/suppression factor.

    Raises
    ------
    ConfigurationError
        If the factor is not a number in [0, 1].
    """
    if not isinstance(gs_factor, numbers.Real) or isinstance(gs_factor, bool):
        raise ConfigurationError(f"gs_factor ({gs_factor!r}) must be a number")
    if math.isnan(gs_factor) or gs_factor < 0 or gs_factor > 1:
        raise ConfigurationError(f"gs_factor ({gs_factor}) must be in [0, 1]")
    return float(gs_factor)


@dataclass(frozen=True)
class ProfitabilityConfiguration:
    """
    Switches of the profitability models, fixed for a whole run.

    Attributes
    ----------
    naive_no_attack : bool
        Keep a class without computing its information loss whenever a
        rational adversary would not attack it. An approximation of the exact
        payout test.
    use_census_data : bool
        Derive the journalist's success probability from population group sizes.
    optimize : bool
        Local recoding mode of the journalist model: keep only classes whose
        payout exceeds ``(1 - gs_factor) * publisher_benefit``, so that the
        optimizer recodes the marginal ones.
    gs_factor : float
        Generalization/suppression factor of the quality model, in [0, 1].
    """

    naive_no_attack: bool = False
    use_census_data: bool = False
    optimize: bool = False
    gs_factor: float = DEFAULT_GS_FACTOR

    def __post_init__(self) -> None:
        check_gs_factor(self.gs_factor)


def sample_success_probability(entry: EquivalenceClass) -> float:
    """Success probability of an attack on a class of the released sample."""
    return 1.0 / entry.count


def subset_success_probability(entry: EquivalenceClass) -> float:
    """
    Success probability of an attack on a class with research subset counts.

    Falls back to the sample count for classes whose subset count is unknown.
    """
    if entry.pcount > 0:
        return 1.0 / entry.pcount
    return 1.0 / entry.count


def is_profitable(
    risk_model: CostBenefitRiskModel,
    information_loss: float,
    success_probability: float,
    threshold: float = 0.0,
) -> bool:
    """Return whether the publisher's expected payout for a record exceeds the threshold."""
    return risk_model.get_expected_publisher_payout(information_loss, success_probability) > threshold


class ProfitabilityCriterion(metaclass=ABCMeta):
    """
    Abstract base class for the profitability privacy models.

    Parameters
    ----------
    cost_benefit_config : CostBenefitConfiguration
        Parameters of the game.
    shares : Sequence[DomainShare]
        Domain shares of each hierarchy dimension.
    microaggregation_functions : Sequence[MicroaggregationFunction], optional
        Microaggregation function of each microaggregated attribute.
    microaggregation_start_index : int, optional
        Offset of the first microaggregated attribute in the classes' distributions.
    config : ProfitabilityConfiguration, optional
        Switches of the model, by default all off.
    logger : logging.Logger, optional
        Logger, by default this module's logger.
    """

    attacker_model: AttackerModel

    def __init__(
        self,
        cost_benefit_config: CostBenefitConfiguration,
        shares: Sequence[DomainShare],
        microaggregation_functions: Optional[Sequence[MicroaggregationFunction]] = None,
        microaggregation_start_index: int = 0,
        config: Optional[ProfitabilityConfiguration] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger if logger is not None else _LOGGER
        self.cost_benefit_config = cost_benefit_config
        self.config = config if config is not None else ProfitabilityConfiguration()
        self.risk_model = CostBenefitRiskModel(cost_benefit_config)
        self.loss_model = DomainLossModel(
            shares, microaggregation_functions, microaggregation_start_index
        )

    @abstractmethod
    def success_probability(self, entry: EquivalenceClass) -> float:
        """
        Return the probability that an attack on a record of the class succeeds.

        Parameters
        ----------
        entry : EquivalenceClass
            A class with ``count > 0``.

        Returns
        -------
        float
            A probability in (0, 1].
        """

    @property
    def payout_threshold(self) -> float:
        """Payout a record must exceed for its class to be kept."""
        return 0.0

    def is_anonymous(self, transformation: Transformation, entry: EquivalenceClass) -> bool:
        """
        Decide whether an equivalence class may be published.

        Parameters
        ----------
        transformation : Transformation
            The transformation that produced the class.
        entry : EquivalenceClass
            The class.

        Returns
        -------
        bool
            True if publishing the class pays off for the publisher.
        """
        # Classes of population records only
        if entry.count == 0:
            return False

        success_probability = self.success_probability(entry)
        if self.config.naive_no_attack and not self.risk_model.is_attack_rational(
            success_probability
        ):
            return True

        information_loss = self.loss_model.information_loss(transformation, entry)
        result = is_profitable(
            self.risk_model, information_loss, success_probability, self.payout_threshold
        )
        if debug_logging_enabled(self.logger):
            self.logger.debug(
                "%s: key %s, p = %s, loss = %s, anonymous = %s",
                self.attacker_model.name.lower(),
                tuple(entry.key),
                success_probability,
                information_loss,
                result,
            )
        return result

    @property
    def is_local_recoding_supported(self) -> bool:
        return True

    @property
    @abstractmethod
    def is_subset_available(self) -> bool:
        """Whether the model is evaluated against a research subset."""

    @property
    def subset(self) -> Optional[DataSubset]:
        return None

    def __str__(self) -> str:
        return f"profitability ({self.attacker_model.name.lower()}){self.cost_benefit_config}"


class ProfitabilityProsecutor(ProfitabilityCriterion):
    """
    Profitability under the prosecutor model.

    Parameters are as for :class:`ProfitabilityCriterion`.

    Raises
    ------
    ConfigurationError
        If the configuration enables census data or local recoding, which
        only apply to the journalist model.
    """

    attacker_model = AttackerModel.PROSECUTOR

    def __init__(
        self,
        cost_benefit_config: CostBenefitConfiguration,
        shares: Sequence[DomainShare],
        microaggregation_functions: Optional[Sequence[MicroaggregationFunction]] = None,
        microaggregation_start_index: int = 0,
        config: Optional[ProfitabilityConfiguration] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(
            cost_benefit_config,
            shares,
            microaggregation_functions,
            microaggregation_start_index,
            config,
            logger,
        )
        if self.config.use_census_data:
            raise ConfigurationError("Census data is only supported by the journalist model")
        if self.config.optimize:
            raise ConfigurationError("Local recoding mode is only supported by the journalist model")

    def success_probability(self, entry: EquivalenceClass) -> float:
        return sample_success_probability(entry)

    @property
    def is_subset_available(self) -> bool:
        return False


class ProfitabilityJournalist(ProfitabilityCriterion):
    """
    Profitability under the journalist model.

    Parameters
    ----------
    subset : DataSubset
        The research subset the released data is drawn from.
    cost_benefit_config : CostBenefitConfiguration
        Parameters of the game.
    shares : Sequence[DomainShare]
        Domain shares of each hierarchy dimension.
    microaggregation_functions : Sequence[MicroaggregationFunction], optional
        Microaggregation function of each microaggregated attribute.
    microaggregation_start_index : int, optional
        Offset of the first microaggregated attribute in the classes' distributions.
    config : ProfitabilityConfiguration, optional
        Switches of the model, by default all off.
    census_map : CensusMap, optional
        Population group sizes by generalized key, required if
        ``config.use_census_data`` is set.
    logger : logging.Logger, optional
        Logger, by default this module's logger.

    Raises
    ------
    ConfigurationError
        If the subset is missing, or census data is enabled without a census
        map matching the domain shares' dimensions.
    """

    attacker_model = AttackerModel.JOURNALIST

    def __init__(
        self,
        subset: DataSubset,
        cost_benefit_config: CostBenefitConfiguration,
        shares: Sequence[DomainShare],
        microaggregation_functions: Optional[Sequence[MicroaggregationFunction]] = None,
        microaggregation_start_index: int = 0,
        config: Optional[ProfitabilityConfiguration] = None,
        census_map: Optional[CensusMap] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if subset is None:
            raise ConfigurationError("The journalist model requires a research subset")
        super().__init__(
            cost_benefit_config,
            shares,
            microaggregation_functions,
            microaggregation_start_index,
            config,
            logger,
        )
        if self.config.use_census_data:
            if census_map is None:
                raise ConfigurationError("Census data is enabled but no census map was given")
            if census_map.num_dimensions != self.loss_model.num_dimensions:
                raise ConfigurationError(
                    f"Census map has {census_map.num_dimensions} dimensions, "
                    f"domain shares have {self.loss_model.num_dimensions}"
                )
        self._subset = subset
        self.census_map = census_map if self.config.use_census_data else None
        self._payout_threshold = (
            (1.0 - self.config.gs_factor) * cost_benefit_config.publisher_benefit
            if self.config.optimize
            else 0.0
        )

    def success_probability(self, entry: EquivalenceClass) -> float:
        probability = subset_success_probability(entry)
        if self.census_map is not None:
            return self.census_map.success_probability(entry, probability)
        return probability

    @property
    def payout_threshold(self) -> float:
        return self._payout_threshold

    @property
    def is_subset_available(self) -> bool:
        return True

    @property
    def subset(self) -> DataSubset:
        return self._subset


def _classify_chunk(
    criterion: ProfitabilityCriterion,
    transformation: Transformation,
    entries: Sequence[EquivalenceClass],
) -> list[bool]:
    return [criterion.is_anonymous(transformation, entry) for entry in entries]


def classify_equivalence_classes(
    criterion: ProfitabilityCriterion,
    transformation: Transformation,
    entries: Iterable[EquivalenceClass],
    executor: Optional[Executor] = None,
    chunk_size: int = DEFAULT_CLASSIFICATION_CHUNK_SIZE,
) -> list[bool]:
    """
    Decide for many equivalence classes whether they may be published.

    Parameters
    ----------
    criterion : ProfitabilityCriterion
        The privacy model.
    transformation : Transformation
        The transformation that produced the classes.
    entries : Iterable[EquivalenceClass]
        The classes.
    executor : Executor, optional
        If given, chunks of classes are evaluated on this executor; otherwise
        they are evaluated in the calling thread.
    chunk_size : int, optional
        Number of classes per submitted task.

    Returns
    -------
    list[bool]
        One decision per class, in input order.

    Raises
    ------
    InvariantViolation
        Propagated from a census-corrected evaluation.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size ({chunk_size}) must be > 0")
    entries = list(entries)
    futures = [
        make_future(executor, _classify_chunk, criterion, transformation, entries[i : i + chunk_size])
        for i in range(0, len(entries), chunk_size)
    ]
    return [decision for chunk in collect_results(futures) for decision in chunk]
