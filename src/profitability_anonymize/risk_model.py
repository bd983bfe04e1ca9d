"""
Cost-benefit risk model of the re-identification game.

The publisher commits to a transformation; a rational adversary then decides
whether attacking a record pays off. An attack costs ``adversary_cost`` and
yields ``adversary_gain`` with the probability ``p`` of a successful
re-identification, so the adversary attacks only if
``adversary_gain * p - adversary_cost > 0``. The publisher earns
``publisher_benefit`` for every record published without information loss,
reduced proportionally to the information loss, and loses ``publisher_loss``
times ``p`` if the adversary attacks.

References
----------
Z. Wan, Y. Vorobeychik, W. Xia, E. W. Clayton, M. Kantarcioglu, R. Ganta,
R. Heatherly, B. A. Malin. "A Game Theoretic Framework for Analyzing
Re-Identification Risk." PLOS ONE 10(3), 2015.
"""

import math
import numbers
from dataclasses import dataclass

from profitability_anonymize.constants import (
    DEFAULT_ADVERSARY_COST,
    DEFAULT_ADVERSARY_GAIN,
    DEFAULT_PUBLISHER_BENEFIT,
    DEFAULT_PUBLISHER_LOSS,
)
from profitability_anonymize.exceptions import ConfigurationError


@dataclass(frozen=True)
class CostBenefitConfiguration:
    """
    Parameters of the Stackelberg game between publisher and adversary.

    Attributes
    ----------
    adversary_cost : float
        Cost of an attack on a single record, must be > 0.
    adversary_gain : float
        Gain of a successful re-identification, must be >= 0.
    publisher_loss : float
        Publisher's loss caused by a successful re-identification, must be >= 0.
    publisher_benefit : float
        Publisher's benefit of publishing a single record without information
        loss, must be > 0.

    Raises
    ------
    ConfigurationError
        If a parameter is out of range or not finite.
    """

    adversary_cost: float = DEFAULT_ADVERSARY_COST
    adversary_gain: float = DEFAULT_ADVERSARY_GAIN
    publisher_loss: float = DEFAULT_PUBLISHER_LOSS
    publisher_benefit: float = DEFAULT_PUBLISHER_BENEFIT

    def __post_init__(self) -> None:
        for name in ("adversary_cost", "adversary_gain", "publisher_loss", "publisher_benefit"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Real) or isinstance(value, bool):
                raise ConfigurationError(f"{name} ({value!r}) must be a number")
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} ({value}) must be finite")
        if self.adversary_cost <= 0:
            raise ConfigurationError(f"adversary_cost ({self.adversary_cost}) must be > 0")
        if self.adversary_gain < 0:
            raise ConfigurationError(f"adversary_gain ({self.adversary_gain}) must be >= 0")
        if self.publisher_loss < 0:
            raise ConfigurationError(f"publisher_loss ({self.publisher_loss}) must be >= 0")
        if self.publisher_benefit <= 0:
            raise ConfigurationError(f"publisher_benefit ({self.publisher_benefit}) must be > 0")

    def __str__(self) -> str:
        return (
            f"[adversaryCost={self.adversary_cost}, adversaryGain={self.adversary_gain}, "
            f"publisherLoss={self.publisher_loss}, publisherBenefit={self.publisher_benefit}]"
        )


class CostBenefitRiskModel:
    """
    Payoffs of publisher and adversary for a single record.

    The model is a pure function of its configuration and safe to share
    between threads.

    Parameters
    ----------
    config : CostBenefitConfiguration
        Parameters of the game.
    """

    def __init__(self, config: CostBenefitConfiguration) -> None:
        self.config = config

    def get_expected_adversary_payout(self, success_probability: float) -> float:
        """
        Return the adversary's expected payoff of attacking a record.

        Parameters
        ----------
        success_probability : float
            Probability in [0, 1] that an attack re-identifies the record.

        Returns
        -------
        float
            ``adversary_gain * success_probability - adversary_cost``
        """
        return self.config.adversary_gain * success_probability - self.config.adversary_cost

    def is_attack_rational(self, success_probability: float) -> bool:
        """Return whether a rational adversary attacks, i.e. its payoff is > 0."""
        return self.get_expected_adversary_payout(success_probability) > 0

    def get_expected_publisher_payout(
        self, information_loss: float, success_probability: float
    ) -> float:
        """
        Return the publisher's expected payout of publishing a record.

        Parameters
        ----------
        information_loss : float
            Information loss in [0, 1] of the record's equivalence class.
        success_probability : float
            Probability in [0, 1] that an attack re-identifies the record.

        Returns
        -------
        float
            ``publisher_benefit * (1 - information_loss)``, reduced by
            ``publisher_loss * success_probability`` if a rational adversary attacks.

        Examples
        --------
        >>> model = CostBenefitRiskModel(CostBenefitConfiguration(4, 300, 300, 1200))
        >>> model.get_expected_publisher_payout(0.1, 0.5)
        930.0
        """
        payout = self.config.publisher_benefit * (1.0 - information_loss)
        if self.is_attack_rational(success_probability):
            payout -= self.config.publisher_loss * success_probability
        return payout

    def __repr__(self) -> str:
        return f"CostBenefitRiskModel({self.config})"
