"""Provisioning plan loader.

Loads the desired mounts, PKI roles and CA access URLs from a YAML file.
Unlike connection settings there are no defaults to fall back on: a plan that
cannot be read or validated is an error.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import ProvisioningPlan

logger = logging.getLogger(__name__)


def parse_provisioning_plan(data: Any) -> ProvisioningPlan:
    """Validate a plan dictionary.

    Args:
        data: Parsed YAML document

    Returns:
        ProvisioningPlan

    Raises:
        ConfigError: If the document is not a mapping or fails validation
    """
    if data is None:
        return ProvisioningPlan()
    if not isinstance(data, dict):
        raise ConfigError("Provisioning plan must contain a YAML dictionary")

    try:
        plan = ProvisioningPlan.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid provisioning plan: {e}") from e

    paths = [m.path for m in plan.mounts]
    duplicates = sorted({p for p in paths if paths.count(p) > 1})
    if duplicates:
        raise ConfigError(f"Mount path(s) listed more than once: {', '.join(duplicates)}")

    return plan


def load_provisioning_plan(plan_path: str | os.PathLike) -> ProvisioningPlan:
    """Load a provisioning plan from a YAML file.

    Raises:
        ConfigError: If the file is missing, is not valid YAML or fails validation
    """
    path = Path(plan_path)
    if not path.exists():
        raise ConfigError(f"Provisioning plan not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        raise ConfigError(f"Failed to read provisioning plan {path}: {e}") from e

    plan = parse_provisioning_plan(data)
    logger.info(
        "Loaded provisioning plan from %s (%d mounts, %d roles)",
        path,
        len(plan.mounts),
        len(plan.roles),
    )
    return plan
