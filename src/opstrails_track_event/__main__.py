import sys
import asyncio
import logging
from typing import Mapping, Optional

from .client import UNEXPECTED_ERROR
from .config import ActionConfig
from .errors import ActionError
from .tracker import track_event
from .workflow import configure_logging, set_failed, set_output

logger = logging.getLogger(__name__)


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    configure_logging(environ)

    try:
        config = ActionConfig.from_env(environ)
        receipt = asyncio.run(track_event(config))
        set_output("event-id", receipt.id, environ)
        set_output("event-time", receipt.time, environ)
    except ActionError as e:
        set_failed(str(e))
        return 1
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        set_failed(str(e) or UNEXPECTED_ERROR)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
