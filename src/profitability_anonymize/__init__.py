"""
Profitability Anonymize - cost-benefit privacy models for data publishing.

This package decides whether equivalence classes produced by a
generalization/suppression transformation may be published, by modeling a
Stackelberg game between a data publisher and a rational re-identification
adversary under the prosecutor, journalist and census-corrected journalist
models. It also provides the entropy-based information loss and the publisher
payout quality metric used to rank and prune transformations.
"""

from profitability_anonymize._version import __version__
from profitability_anonymize.census import CensusMap
from profitability_anonymize.criteria import (
    AttackerModel,
    ProfitabilityConfiguration,
    ProfitabilityCriterion,
    ProfitabilityJournalist,
    ProfitabilityProsecutor,
    classify_equivalence_classes,
)
from profitability_anonymize.domain_shares import DomainShare, DomainShareMaterialized
from profitability_anonymize.exceptions import (
    ConfigurationError,
    InvariantViolation,
    LoadError,
    ProfitabilityError,
)
from profitability_anonymize.hierarchies import Hierarchy, generalize_record
from profitability_anonymize.information_loss import (
    DomainLossModel,
    compute_entropy_information_loss,
    compute_maximal_entropy_information_loss,
)
from profitability_anonymize.metrics import PayoutInformationLoss, PublisherPayoutMetric
from profitability_anonymize.microaggregation import (
    MicroaggregationFunctionType,
    make_microaggregation_function,
)
from profitability_anonymize.population import PopulationFrequencyTable
from profitability_anonymize.risk_model import CostBenefitConfiguration, CostBenefitRiskModel
from profitability_anonymize.structures import DataSubset, EquivalenceClass, Transformation

__all__ = [
    "__version__",
    "AttackerModel",
    "CensusMap",
    "ConfigurationError",
    "CostBenefitConfiguration",
    "CostBenefitRiskModel",
    "DataSubset",
    "DomainLossModel",
    "DomainShare",
    "DomainShareMaterialized",
    "EquivalenceClass",
    "Hierarchy",
    "InvariantViolation",
    "LoadError",
    "MicroaggregationFunctionType",
    "PayoutInformationLoss",
    "PopulationFrequencyTable",
    "ProfitabilityConfiguration",
    "ProfitabilityCriterion",
    "ProfitabilityError",
    "ProfitabilityJournalist",
    "ProfitabilityProsecutor",
    "PublisherPayoutMetric",
    "Transformation",
    "classify_equivalence_classes",
    "compute_entropy_information_loss",
    "compute_maximal_entropy_information_loss",
    "generalize_record",
    "make_microaggregation_function",
]
