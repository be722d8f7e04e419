"""
A4E cdk-nag Suppressions

Compliance handler applied by the orchestrator to every unit once it is Ready.
Reasons live in config.NAG_SUPPRESSIONS, keyed by unit name.
"""

import logging

from cdk_nag import NagSuppressions
import config

logger = logging.getLogger(__name__)

def applyNagSuppressions(unit, suppressions=None):
    suppressions = config.NAG_SUPPRESSIONS if suppressions is None else suppressions
    rules = suppressions.get(unit.name, [])
    if not rules:
        return
    NagSuppressions.add_stack_suppressions(unit.stack, rules)
    logger.info(f"suppressed {', '.join(rule['id'] for rule in rules)} on {unit.name}")
