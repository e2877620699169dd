"""Custom exceptions for the benchmarking system."""
from typing import Optional


class BenchmarkExecutionError(Exception):
    """Custom exception for benchmark execution failures."""
    pass


class EndpointConnectionError(BenchmarkExecutionError):
    """Exception raised when an endpoint cannot be reached."""

    def __init__(self, endpoint, scenario: Optional[str] = None):
        self.endpoint = endpoint
        self.scenario = scenario
        where = f" during '{scenario}'" if scenario else ""
        super().__init__(
            f"{endpoint.label} at {endpoint.address} is unreachable{where} - verify it is running"
        )


class ScenarioExecutionError(BenchmarkExecutionError):
    """Exception raised when a command fails in the middle of a scenario."""

    def __init__(self, endpoint, scenario: str):
        self.endpoint = endpoint
        self.scenario = scenario
        super().__init__(f"Scenario '{scenario}' failed on {endpoint.label} ({endpoint.address})")


class ScenarioTimeoutError(BenchmarkExecutionError):
    """Exception raised when a scenario exceeds its configured timeout."""

    def __init__(self, endpoint, scenario: str, timeout: float):
        self.endpoint = endpoint
        self.scenario = scenario
        self.timeout = timeout
        super().__init__(
            f"Scenario '{scenario}' on {endpoint.label} ({endpoint.address}) exceeded {timeout}s"
        )


class ResultLoadError(Exception):
    """Exception raised when exported results cannot be loaded."""
    pass
