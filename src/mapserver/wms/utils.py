"""
utils.py

Logging helpers for the WMS layer.

- `setup_logging(level=None)` : attach a single console handler to the "mapserver" logger
- `safe_log_exception(msg, exc, **ctx)` : log an exception with traceback, never raise

"""

from typing import Any, Optional
import sys
import logging

from mapserver.config import LOGGING

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None) -> logging.Logger:
	"""Configure and return the package logger.

	Adds one `StreamHandler` on stdout the first time it is called; later
	calls only adjust the level.
	"""
	log = logging.getLogger('mapserver')
	if not log.handlers:
		h = logging.StreamHandler(sys.stdout)
		h.setFormatter(logging.Formatter(LOGGING['format']))
		log.addHandler(h)
	log.setLevel(level or LOGGING['level'])
	return log


def safe_log_exception(msg: str, exc: Exception, **ctx: Any) -> None:
	"""Log an exception robustly.

	Logs at WARNING with the traceback attached. If logging fails for any reason,
	falls back to writing a compact message to `sys.stderr`.
	"""
	try:
		if ctx:
			ctx_s = ' | '.join(f"{k}={v!r}" for k, v in ctx.items())
			logger.warning('%s | %s | %s', msg, exc, ctx_s, exc_info=exc)
		else:
			logger.warning('%s | %s', msg, exc, exc_info=exc)
	except Exception:
		try:
			sys.stderr.write(f'LOGGING FAILURE: {msg} {exc}\n')
		except Exception:
			pass
