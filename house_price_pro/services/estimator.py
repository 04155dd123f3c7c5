"""
Estimator boundary: the only place the API talks to the estimation engine.

The engine runs as a separate process. Each call:
- launches one engine process with its own pipes
- writes the request once (estimate mode) and closes stdin
- waits for the process to exit, collecting all of stdout and stderr
- fails on a non-zero exit with the captured stderr, never reading stdout
- parses stdout only after a clean exit

Calls are bounded by a timeout (the hung engine and every process it spawned
are killed, then the engine is reaped) and by a semaphore limiting how many
engine processes run at once. Nothing is retried here; callers decide
whether an estimate is worth asking for again.
"""

import json
import logging
import os
import signal
import subprocess
import threading
from typing import Optional, Protocol, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from house_price_pro.config import EngineConfig
from house_price_pro.errors import EstimationError
from house_price_pro.models import ModelMetrics, PredictionResult, PropertyFeatures

logger = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)

# Grace period for reaping a killed engine before giving up on its pipes.
REAP_TIMEOUT_SECONDS = 5.0


class Estimator(Protocol):
    """Anything that can price a property and report model metrics."""

    def estimate(self, features: PropertyFeatures) -> PredictionResult:
        ...

    def fetch_metrics(self) -> ModelMetrics:
        ...


class EstimatorBoundary:
    """Blocking, process-backed implementation of ``Estimator``.

    Attributes:
        config: Engine launch and supervision settings
    """

    def __init__(self, config: EngineConfig):
        self.config = config
        self._slots = threading.BoundedSemaphore(config.max_concurrency)

    def estimate(self, features: PropertyFeatures) -> PredictionResult:
        """Price a validated property.

        Raises:
            EstimationError: If the engine fails, times out or returns a
                response that is not a well-formed ``PredictionResult``
        """
        payload = json.dumps(features.to_engine_payload()) + "\n"
        stdout = self._call(list(self.config.command), payload)
        return self._parse(stdout, PredictionResult)

    def fetch_metrics(self) -> ModelMetrics:
        """Fetch model quality metrics; no payload is sent.

        Raises:
            EstimationError: On any engine failure or malformed response
        """
        stdout = self._call([*self.config.command, self.config.metrics_flag], None)
        return self._parse(stdout, ModelMetrics)

    def _call(self, argv: list[str], payload: Optional[str]) -> str:
        with self._slots:
            return self._run(argv, payload)

    def _run(self, argv: list[str], payload: Optional[str]) -> str:
        logger.debug("Launching estimation engine: %s", argv)
        try:
            # Own session so a timeout can kill the engine and anything it spawned.
            process = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self.config.env,
                start_new_session=True,
            )
        except OSError as e:
            logger.error("Could not launch estimation engine %s: %s", argv[0], e)
            raise EstimationError(f"could not launch engine: {e}") from e

        data = (payload or "").encode("utf-8")
        try:
            stdout, stderr = process.communicate(input=data, timeout=self.config.timeout_seconds)
        except subprocess.TimeoutExpired as e:
            self._kill(process)
            logger.error(
                "Estimation engine (pid %d) exceeded %.1fs and was killed",
                process.pid,
                self.config.timeout_seconds,
            )
            raise EstimationError(EstimationError.TIMEOUT) from e

        diagnostics = stderr.decode("utf-8", errors="replace").strip()
        if process.returncode != 0:
            diagnostics = diagnostics or f"engine exited with status {process.returncode}"
            logger.error(
                "Estimation engine exited with status %d: %s", process.returncode, diagnostics
            )
            raise EstimationError(diagnostics)

        if diagnostics:
            logger.warning("Estimation engine stderr: %s", diagnostics)

        try:
            return stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            logger.error("Estimation engine wrote non UTF-8 output: %s", e)
            raise EstimationError(EstimationError.MALFORMED, detail=str(e)) from e

    @staticmethod
    def _kill(process: subprocess.Popen) -> None:
        """Kill the engine's whole process group and reap the engine."""
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass  # already gone
        try:
            process.communicate(timeout=REAP_TIMEOUT_SECONDS)
        except subprocess.TimeoutExpired:
            # A process that left the group still holds the pipes.
            logger.warning("Engine pipes still open after kill (pid %d)", process.pid)
            process.kill()
            process.wait()

    @staticmethod
    def _parse(stdout: str, model: type[ResponseModel]) -> ResponseModel:
        try:
            return model.model_validate_json(stdout)
        except PydanticValidationError as e:
            logger.error("Malformed engine response for %s: %s", model.__name__, e)
            raise EstimationError(EstimationError.MALFORMED, detail=str(e)) from e

