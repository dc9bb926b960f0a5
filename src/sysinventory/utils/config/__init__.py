# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: Apache-2.0

"""
Configuration utilities package.

Provides the immutable run configuration and loading of package category
definitions from YAML files and environment variables.
"""

from .config import *

__all__ = [
    "Category",
    "RunConfig",
    "report_path_for",
    "get_project_name",
    "get_dist_version",
    "get_default_output_dir",
    "load_yaml_config",
    "load_categories",
    "DEFAULT_CATEGORIES_FILE",
    "OUTPUT_DIR_ENV",
    "CATEGORIES_ENV",
    "REPORT_PREFIX",
]
