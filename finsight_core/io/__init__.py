from finsight_core.io.ledger import load_ledger  # noqa: F401
from finsight_core.io.config import (  # noqa: F401
    load_analysis_config,
    load_session,
    save_session,
)

__all__ = ["load_ledger", "load_analysis_config", "load_session", "save_session"]
