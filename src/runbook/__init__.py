# Copyright 2025 Ben Mensi
# SPDX-License-Identifier: Apache-2.0

"""Sensu runbook automation: execute commands on Sensu Go agent nodes."""

__version__ = "0.2.0"
