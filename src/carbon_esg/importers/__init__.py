# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""File importers for activity entries."""

from carbon_esg.importers.file_import import FileImporter, ImportResult

__all__ = ["FileImporter", "ImportResult"]
