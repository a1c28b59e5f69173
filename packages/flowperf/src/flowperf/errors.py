"""Exception types raised by the alerting pipeline."""


class FlowPerfError(Exception):
    """Base class for flowperf errors."""


class MissingBaselineError(FlowPerfError, KeyError):
    """An eligible result has no fetched baseline for its flow/action key."""

    def __init__(self, flow_name: str, action_name: str) -> None:
        self.flow_name = flow_name
        self.action_name = action_name
        super().__init__(f"No baseline fetched for flow '{flow_name}', action '{action_name}'")

    def __str__(self) -> str:
        return self.args[0]


class RangeConfigError(FlowPerfError, ValueError):
    """A range/tolerance policy file is missing or malformed."""


class StoreUnavailableError(FlowPerfError):
    """A database is configured but no result store could be reached."""
