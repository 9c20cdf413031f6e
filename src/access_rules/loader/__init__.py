# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Declarative access configuration.

Exports:
    AccessFactory: Builds AccessConfig / AccessManager from documents
    AccessSchema: Top-level document schema
"""

from .factory import AccessFactory
from .schema import (
    AccessSchema,
    AllowRuleSchema,
    GrantTableSchema,
    NoMatchSchema,
    RequiredRuleSchema,
)

__all__ = [
    "AccessFactory",
    "AccessSchema",
    "AllowRuleSchema",
    "GrantTableSchema",
    "NoMatchSchema",
    "RequiredRuleSchema",
]
