import logging

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS = set(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime"}


class PrivacyFilter(logging.Filter):
    """Redact caller-identifying fields from structured logs."""

    BLOCKED_KEYS = {"email"}

    def filter(self, record: logging.LogRecord) -> bool:
        for key in self.BLOCKED_KEYS:
            if hasattr(record, key):
                setattr(record, key, "[REDACTED]")
        return True


class ExtraFormatter(logging.Formatter):
    """Append ``extra=`` fields to the line as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS}
        if not extras:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in sorted(extras.items()))
        head, sep, tail = line.partition("\n")
        return f"{head} {pairs}{sep}{tail}"


def configure_logging() -> None:
    logging.basicConfig(level=logging.INFO)
    # Handler-level so records propagated from module loggers are filtered too.
    for handler in logging.getLogger().handlers:
        handler.setFormatter(ExtraFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        if not any(isinstance(f, PrivacyFilter) for f in handler.filters):
            handler.addFilter(PrivacyFilter())
