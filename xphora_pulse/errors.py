class PulseError(Exception):
    """Base class for errors raised by the insights engine."""


class ConfigError(PulseError):
    """An environment variable holds a value the engine cannot use."""


class ReportConversionError(PulseError):
    """A citizen report cannot be mapped onto an event type."""

    def __init__(self, category, report_id=None):
        self.category = category
        self.report_id = report_id
        super().__init__(f"Report category '{category}' has no matching event type")
