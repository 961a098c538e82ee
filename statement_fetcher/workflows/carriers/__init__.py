"""
statement_fetcher/workflows/carriers package marker.
"""

from statement_fetcher.workflows.base import CarrierWorkflow
from statement_fetcher.workflows.carriers.com_acuity import AcuityWorkflow
from statement_fetcher.workflows.carriers.com_advantagepartners import (
    AdvantagePartnersWorkflow,
    APAgentsWorkflow,
)
from statement_fetcher.workflows.carriers.com_bitco import BitcoWorkflow
from statement_fetcher.workflows.carriers.com_cmfgroup import CMFGroupWorkflow
from statement_fetcher.workflows.carriers.com_ufginsurance import UFGInsuranceWorkflow
from statement_fetcher.workflows.carriers.net_abacus import AbacusWorkflow

BUILTIN_WORKFLOWS: dict[str, type[CarrierWorkflow]] = {
    workflow.slug: workflow
    for workflow in (
        AbacusWorkflow,
        AcuityWorkflow,
        AdvantagePartnersWorkflow,
        APAgentsWorkflow,
        BitcoWorkflow,
        CMFGroupWorkflow,
        UFGInsuranceWorkflow,
    )
}

__all__ = [
    "BUILTIN_WORKFLOWS",
    "AbacusWorkflow",
    "AcuityWorkflow",
    "AdvantagePartnersWorkflow",
    "APAgentsWorkflow",
    "BitcoWorkflow",
    "CMFGroupWorkflow",
    "UFGInsuranceWorkflow",
]
