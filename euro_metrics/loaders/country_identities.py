from pathlib import Path
from typing import Tuple

import yaml

CONFIG_PATH = Path(__file__).resolve().parents[1] / "config" / "countries.yml"
with CONFIG_PATH.open() as f:
    CONFIG = yaml.safe_load(f)

COUNTRY_IDENTITIES: Tuple[str, ...] = tuple(CONFIG.get("countries", []))
