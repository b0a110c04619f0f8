# src/jsonderef/enums.py
from enum import Enum


class OutputFormat(str, Enum):
    auto = "auto"
    json = "json"
    yaml = "yaml"
