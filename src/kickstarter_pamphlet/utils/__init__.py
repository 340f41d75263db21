from kickstarter_pamphlet.utils.config import load_config
from kickstarter_pamphlet.utils.logging import setup_logging

__all__ = ["load_config", "setup_logging"]
